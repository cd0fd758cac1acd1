from cinecatalog.routes.v1 import bp as api_v1
from cinecatalog.routes.v2 import bp as api_v2

__all__ = ["api_v1", "api_v2"]
