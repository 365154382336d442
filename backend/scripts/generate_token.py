"""Generate a service token for calling the Forms Config API locally.

The token is signed with JWT_SECRET (read from the environment or .env) and
is valid for 90 days.

Usage:
    JWT_SECRET=<secret> python -m scripts.generate_token [--service-id ID] [--service-name NAME] [--save]

With --save the token is written to http-client.private.env.json as
``local.authToken``, which HTTP client request files read as {{authToken}}.
"""

import argparse
import json
import logging
from pathlib import Path

from forms_api.core.config import get_settings
from forms_api.services.auth import create_service_token

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

PRIVATE_ENV_FILE = Path("http-client.private.env.json")


def save_token(token: str, path: Path = PRIVATE_ENV_FILE, environment: str = "local") -> None:
    """Merge the token into an HTTP client private env file, keeping other entries."""
    data = json.loads(path.read_text()) if path.exists() else {}
    data.setdefault(environment, {})["authToken"] = token
    path.write_text(json.dumps(data, indent=2) + "\n")
    logger.info("Saved token to %s (%s)", path, environment)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a Forms Config API service token")
    parser.add_argument(
        "--service-id",
        type=str,
        default="test-service-001",
        help="serviceId claim (default: test-service-001)",
    )
    parser.add_argument(
        "--service-name",
        type=str,
        default="Test Service",
        help="serviceName claim (default: Test Service)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help=f"Write the token to {PRIVATE_ENV_FILE} instead of printing it",
    )
    args = parser.parse_args()

    settings = get_settings()
    token = create_service_token(
        args.service_id,
        args.service_name,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )

    if args.save:
        save_token(token)
    else:
        print(token)


if __name__ == "__main__":
    main()
