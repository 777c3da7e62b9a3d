"""Print a bearer token for the Health System API.

Usage:
    python create_token.py [subject] [--hours N]

The token is signed with ``SECRET_KEY`` from the environment, so run
this with the same environment as the API server.
"""
import argparse

from health_system_api.app.core.security import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue an API access token")
    parser.add_argument("subject", nargs="?", default="admin@example.com", help="value of the 'sub' claim")
    parser.add_argument("--hours", type=int, default=None, help="token lifetime in hours")
    args = parser.parse_args()
    expires = args.hours * 3600 if args.hours is not None else None
    print(create_access_token({"sub": args.subject}, expires_delta=expires))


if __name__ == "__main__":
    main()
