"""Issue a bearer token for local development.

Usage:
    python -m scripts.issue_token <user_id> [role ...]
Prints a JWT signed with SECRET_KEY carrying the given roles.
"""

import sys

from cms.core.config import get_settings
from cms.infrastructure.security.jwt import create_access_token


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.issue_token <user_id> [role ...]", file=sys.stderr)
        sys.exit(1)
    user_id = sys.argv[1]
    roles = sys.argv[2:]

    get_settings()
    token = create_access_token({"sub": user_id, "roles": roles})
    print(token)


if __name__ == "__main__":
    main()
