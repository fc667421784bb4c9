"""Webflow OAuth2 helper.

Run this script to complete the OAuth2 flow and get an access token:

    python scripts/webflow_oauth.py

Reads WEBFLOW_CLIENT_ID and WEBFLOW_CLIENT_SECRET from the environment or .env.
"""

from growthtrack.auth.oauth.webflow import cli

if __name__ == "__main__":
    cli()
