"""API blueprint package mounting the customer and vendor endpoints."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register related blueprints beneath a common prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Prefix applied to all entries; may be empty to mount at the root.
    entries:
        Iterable of ``(blueprint, relative_prefix)`` pairs where
        ``relative_prefix`` is appended to ``base_prefix``.
    """

    for bp, rel_prefix in entries:
        full_prefix = "/".join(
            segment for segment in [base_prefix.strip("/"), rel_prefix.strip("/")] if segment
        )
        app.register_blueprint(bp, url_prefix="/" + full_prefix if full_prefix else None)


def init_app(app: Flask) -> None:
    """Register the API blueprints on the Flask app."""

    from .customers import bp as customers_bp
    from .health import bp as health_bp
    from .vendors import bp as vendors_bp

    # Each tuple: (blueprint, url_prefix_relative_to_base)
    registry: list[tuple[Blueprint, str]] = [
        (health_bp, ""),
        (customers_bp, "/customers"),
        (vendors_bp, "/vendors"),
    ]
    register_blueprint_group(
        app, base_prefix=app.config.get("API_BASE_PREFIX", ""), entries=registry
    )


__all__ = ["init_app", "register_blueprint_group"]
