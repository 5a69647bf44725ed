"""CLI entrypoint for geo_reference."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional

from pydantic import BaseModel

from geo_reference.logging_config import setup_logging


def main(argv: Optional[list[str]] = None) -> int:
    setup_logging()

    parser = argparse.ArgumentParser(prog="geo-reference")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")
    sub.add_parser("stats")

    country_parser = sub.add_parser("country")
    country_parser.add_argument("code")
    country_parser.add_argument("--info", action="store_true", help="Include state and city counts")

    states_parser = sub.add_parser("states")
    states_parser.add_argument("code")

    cities_parser = sub.add_parser("cities")
    cities_parser.add_argument("code")
    cities_parser.add_argument("--state-id", type=int, default=None)

    search_parser = sub.add_parser("search")
    search_parser.add_argument("kind", choices=["countries", "states", "cities", "languages"])
    search_parser.add_argument("query")
    search_parser.add_argument("--country", default=None)
    search_parser.add_argument("--state-id", type=int, default=None)

    currency_parser = sub.add_parser("currency")
    currency_parser.add_argument("code")

    timezone_parser = sub.add_parser("timezone")
    timezone_parser.add_argument("zone")

    args = parser.parse_args(argv)

    if args.command == "serve":
        _serve()
        return 0

    from geo_reference.engine import get_engine

    engine = get_engine()

    if args.command == "stats":
        result: Any = engine.get_statistics()
    elif args.command == "country":
        result = engine.get_country_info(args.code) if args.info else engine.get_country_by_code(args.code)
    elif args.command == "states":
        result = engine.get_states_by_country(args.code)
    elif args.command == "cities":
        if args.state_id is not None:
            result = engine.search_cities("", args.code, args.state_id)
        else:
            result = engine.get_cities_by_country(args.code)
    elif args.command == "search":
        result = _search(engine, args)
    elif args.command == "currency":
        result = engine.get_currency_by_code(args.code.upper())
    else:
        result = engine.get_countries_by_timezone(args.zone)

    print(json.dumps(_to_jsonable(result), ensure_ascii=False, indent=2))
    return 1 if result is None else 0


def _search(engine, args: argparse.Namespace) -> list:
    if args.kind == "countries":
        return engine.search_countries(args.query)
    if args.kind == "states":
        return engine.search_states(args.query, args.country)
    if args.kind == "cities":
        return engine.search_cities(args.query, args.country, args.state_id)
    return engine.search_languages(args.query)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def _serve() -> None:
    import uvicorn

    from geo_reference.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "geo_reference.api:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=(settings.env == "development"),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
