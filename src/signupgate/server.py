"""
SignupGate Server - gate-facing API for the signup form.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable

import click
from flask import Flask, jsonify, request
from rich.console import Console

from signupgate import __version__
from signupgate.breach.client import PwnedPasswordsClient
from signupgate.breach.models import BreachHashPair, PasswordCheckResult
from signupgate.cache import TTLCache
from signupgate.config import GateConfig
from signupgate.errors import InvalidInputError
from signupgate.identity.client import IdentityStoreClient
from signupgate.identity.models import IdentityError, UniquenessResult
from signupgate.wizard.validation import is_valid_email

logger = logging.getLogger(__name__)

IDENTITY_ERROR_STATUS = {
    IdentityError.NOT_CONFIGURED: 503,
    IdentityError.UPSTREAM_FAILURE: 502,
}


class GateServer:
    """REST API server for the signup gate.

    Provides endpoints for:
    - Breach checks on client-side hash parts (POST /api/check-breach)
    - Email uniqueness checks (POST /api/check-email)
    - Combined signup verification (POST /api/verify-signup)

    One range cache is shared by every request the server handles.
    """

    def __init__(
        self,
        config: GateConfig | None = None,
        range_cache: TTLCache | None = None,
        breach_client_factory: Callable[[], PwnedPasswordsClient] | None = None,
        identity_client_factory: Callable[[], IdentityStoreClient] | None = None,
    ):
        self.config = config or GateConfig.from_env()
        self.range_cache = range_cache or TTLCache(default_ttl=self.config.breach_cache_ttl_seconds)

        self._breach_client_factory = breach_client_factory or (
            lambda: PwnedPasswordsClient.from_config(self.config, cache=self.range_cache)
        )
        self._identity_client_factory = identity_client_factory or (
            lambda: IdentityStoreClient.from_config(self.config)
        )

        self.app = Flask(__name__)
        self._setup_routes()

    async def _check_breach(self, pair: BreachHashPair) -> PasswordCheckResult:
        async with self._breach_client_factory() as client:
            return await client.check_hash_pair(pair)

    async def _check_email(self, email: str) -> UniquenessResult:
        async with self._identity_client_factory() as client:
            return await client.check_email_exists(email)

    async def _verify_signup(
        self, email: str, pair: BreachHashPair
    ) -> tuple[UniquenessResult, PasswordCheckResult]:
        uniqueness = await self._check_email(email)
        if not uniqueness.ok:
            return uniqueness, PasswordCheckResult(hash_prefix=pair.prefix)
        try:
            breach = await self._check_breach(pair)
        except Exception:
            logger.exception("verify-signup: breach lookup raised, failing open")
            breach = PasswordCheckResult(hash_prefix=pair.prefix, failed_open=True)
        return uniqueness, breach

    def _setup_routes(self):
        """Setup Flask routes."""

        @self.app.after_request
        def after_request(response):
            response.headers["X-SignupGate-Version"] = __version__
            return response

        @self.app.route("/health")
        def health():
            return jsonify({"status": "ok", "timestamp": datetime.now().isoformat()})

        @self.app.route("/api/check-breach", methods=["POST"])
        def check_breach():
            """Check client-side SHA-1 parts. Faults fail open."""
            data = request.get_json(silent=True) or {}
            if not isinstance(data, dict):
                return jsonify({"error": "Invalid prefix/suffix"}), 400
            try:
                pair = BreachHashPair.from_parts(data.get("prefix"), data.get("suffix"))
            except InvalidInputError:
                return jsonify({"error": "Invalid prefix/suffix"}), 400

            try:
                result = asyncio.run(self._check_breach(pair))
            except Exception:
                logger.exception("/api/check-breach error")
                return jsonify({"breached": False})

            return jsonify(result.to_response())

        @self.app.route("/api/check-email", methods=["POST"])
        def check_email():
            """Check email uniqueness. Failures are blocking, never exists=false."""
            data = request.get_json(silent=True) or {}
            if not isinstance(data, dict):
                return jsonify({"error": "invalid_email"}), 400
            email = data.get("email")
            if not isinstance(email, str) or not is_valid_email(email):
                return jsonify({"error": "invalid_email"}), 400

            try:
                result = asyncio.run(self._check_email(email))
            except Exception:
                logger.exception("/api/check-email error")
                return jsonify({"error": "internal_error"}), 500

            if result.error is not None:
                return jsonify(result.to_response()), IDENTITY_ERROR_STATUS[result.error]

            return jsonify(result.to_response())

        @self.app.route("/api/verify-signup", methods=["POST"])
        def verify_signup():
            """Combined uniqueness and breach check for one signup attempt.

            Identity failures block here as they do on /api/check-email;
            only the breach lookup fails open.
            """
            data = request.get_json(silent=True) or {}
            if not isinstance(data, dict):
                return jsonify({"error": "Invalid request body"}), 400
            email = str(data.get("email") or "").strip()
            if not is_valid_email(email):
                return jsonify({"error": "Invalid email"}), 400

            try:
                pair = BreachHashPair.from_parts(data.get("prefix"), data.get("suffix"))
            except InvalidInputError:
                return jsonify({"error": "Invalid hash parts"}), 400

            try:
                uniqueness, breach = asyncio.run(self._verify_signup(email, pair))
            except Exception:
                logger.exception("/api/verify-signup error")
                return jsonify({"error": "internal_error"}), 500

            if uniqueness.error is not None:
                logger.warning(f"verify-signup: identity lookup failed ({uniqueness.error.value})")
                return jsonify(uniqueness.to_response()), IDENTITY_ERROR_STATUS[uniqueness.error]

            return jsonify({"exists": uniqueness.exists, "breached": breach.breached})

    def run(self, host: str = "0.0.0.0", port: int = 8080, debug: bool = False):
        """Run the development server."""
        self.app.run(host=host, port=port, debug=debug)


def create_app(config: GateConfig | None = None) -> Flask:
    """Application factory for WSGI servers."""
    return GateServer(config=config).app


@click.group()
def server():
    """Signup gate API server."""
    pass


@server.command("run")
@click.option("--host", default="0.0.0.0", help="Host to bind to")
@click.option("--port", "-p", type=int, default=8080, help="Port to listen on")
@click.option("--debug", is_flag=True, help="Enable debug mode")
def server_run(host: str, port: int, debug: bool):
    """Run the signup gate API server.

    Examples:
        signupgate server run
        signupgate server run --port 9000
    """
    console = Console()
    config = GateConfig.from_env()

    errors = config.validate()
    if errors:
        console.print(f"[red]Configuration errors: {', '.join(errors)}[/red]")
        raise SystemExit(1)

    if not config.identity_configured:
        console.print("[yellow]Warning: identity store not configured; email checks will return 503[/yellow]")

    console.print(f"[green]Starting signup gate server on {host}:{port}[/green]")
    GateServer(config=config).run(host=host, port=port, debug=debug)
