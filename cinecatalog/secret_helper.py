# Database password lookup for deployments that keep it in Secret Manager.
#
# Order of precedence:
#   DB_PASSWORD                        plain env var, used for local development
#   DB_PASSWORD_SECRET + GCP_PROJECT   secret read through the Secret Manager API
#
# A lookup failure is logged and yields None; config then builds the URL
# without a password and the connection error surfaces from the driver.

import logging
import os

from google.cloud import secretmanager

_logger = logging.getLogger(__name__)

GCP_RUNTIME_MARKERS = ("GAE_ENV", "CLOUD_RUN_SERVICE", "K_SERVICE", "GOOGLE_CLOUD_PROJECT")


def running_on_gcp() -> bool:
    return any(os.environ.get(marker) for marker in GCP_RUNTIME_MARKERS)


def secret_version_path(project_id: str, secret_name: str, version: str = "latest") -> str:
    return f"projects/{project_id}/secrets/{secret_name}/versions/{version}"


def get_secret_from_manager(project_id: str, secret_name: str) -> str:
    """Fetch the payload of the latest version of secret_name as text."""
    client = secretmanager.SecretManagerServiceClient()
    version = client.access_secret_version(request={"name": secret_version_path(project_id, secret_name)})
    return version.payload.data.decode("utf-8")


def load_database_password(project_id: str = None, secret_name: str = None) -> str | None:
    """
    Resolve the database password, or None when none is configured or reachable.

    Secret Manager is only consulted on GCP, or locally when ENABLE_GCP_SECRETS
    is set, since the client blocks for a long time without credentials.
    """
    password = os.environ.get("DB_PASSWORD")
    if password:
        return password

    project_id = project_id or os.environ.get("GCP_PROJECT")
    secret_name = secret_name or os.environ.get("DB_PASSWORD_SECRET")
    if not (project_id and secret_name):
        _logger.debug("No database password configured")
        return None

    if not (running_on_gcp() or os.environ.get("ENABLE_GCP_SECRETS")):
        _logger.warning("DB_PASSWORD_SECRET=%s ignored outside GCP; set ENABLE_GCP_SECRETS=1 to read it", secret_name)
        return None

    try:
        password = get_secret_from_manager(project_id, secret_name)
    except Exception:
        _logger.exception("Could not read secret %s from project %s", secret_name, project_id)
        return None

    _logger.info("Database password loaded from secret %s", secret_name)
    return password
