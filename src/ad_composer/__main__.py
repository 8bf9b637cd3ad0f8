"""
Usage:
  python -m ad_composer path/to/product.jpg --family promo --family luxury

Uploads one product photo, generates creatives and copies the PNGs into
--output. Uses the mock AI backend unless AI_BACKEND=live.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ad_composer.utils.http_client import configure_ssl_globally

configure_ssl_globally()

from ad_composer.config import get_settings  # noqa: E402
from ad_composer.errors import AdComposerError  # noqa: E402
from ad_composer.models import FORMAT_DIMS, LANGUAGES, SelectionOptions  # noqa: E402
from ad_composer.service import CreativeService  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="ad_composer",
        description="Compose ad creatives from a product photo",
    )
    parser.add_argument("image", type=Path, help="product photo (PNG, JPEG or WebP)")
    parser.add_argument(
        "--family",
        action="append",
        default=[],
        help="family id to generate (repeatable). Omit for every family",
    )
    parser.add_argument(
        "--recommend",
        action="store_true",
        help="let the copy generator pick a single family",
    )
    parser.add_argument("--language", choices=LANGUAGES, default=settings.default_language)
    parser.add_argument("--format", choices=sorted(FORMAT_DIMS), default=settings.default_format)
    parser.add_argument(
        "--all-styles",
        action="store_true",
        help="render every style of each family instead of one random pick",
    )
    parser.add_argument("--output", type=Path, default=Path("output"), help="output directory")
    return parser.parse_args(argv)


def _options(args: argparse.Namespace) -> SelectionOptions:
    if args.recommend:
        family_mode = "recommended"
    elif args.family:
        family_mode = "explicit"
    else:
        family_mode = "all"
    return SelectionOptions(
        families=args.family,
        family_mode=family_mode,
        language=args.language,
        format=args.format,
        style_mode="all" if args.all_styles else "one",
    )


async def main(args: argparse.Namespace) -> None:
    service = CreativeService.from_settings()
    image = await service.upload_image(args.image.name, args.image.read_bytes())
    results = await service.generate(image.id, _options(args))

    args.output.mkdir(parents=True, exist_ok=True)
    print(f"\n✓ {len(results)} creatives for {args.image.name}")
    for result in results:
        data = await service.storage.read("generated", result.location)
        target = args.output / f"{result.family_id}_{result.style_id}_{result.id}.png"
        target.write_bytes(data)
        print(f"  {result.family_id:<12} {result.style_id:<24} → {target}")


def cli() -> None:
    arguments = parse_args()
    try:
        asyncio.run(main(arguments))
    except AdComposerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()
