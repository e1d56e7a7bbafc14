#!/usr/bin/env python3
"""
Example: Build the example token tree into CSS, TypeScript and JSON.

This demonstrates the full pipeline from layered token sources to
artifacts, then queries the registry the build leaves behind.

Usage:
    python examples/build_tokens.py
    # Creates: examples/output/

This is the "Hello World" for chuk-mcp-tokens - proving that:
1. Layered JSON/YAML sources merge per theme
2. References resolve and are indexed both ways
3. Composite typography expands into child tokens
4. Only values a theme changes end up in its stylesheet
"""

from pathlib import Path

from chuk_mcp_tokens.build import BuildSession
from chuk_mcp_tokens.docs import compute_stats


async def main() -> None:
    """Build the example tokens and print what came out."""
    config_path = Path(__file__).parent / "tokens.yaml"

    print("CHUK Tokens Build")
    print("=" * 40)
    print(f"Config: {config_path.name}")
    print()

    session = BuildSession(config_path=config_path)
    print(f"Sources: {session.config.source_dir}")
    print(f"Output: {session.config.output_dir}")
    print()

    # Build
    print("Building...")
    result = await session.build()
    print(f"  Tokens: {len(result.registry)}")
    print(f"  Themes: {', '.join(result.themes)}")
    for theme, count in result.overrides.items():
        print(f"  {theme} overrides: {count}")
    print()

    print("Files:")
    for filename in sorted(result.files):
        print(f"  {filename}")
    print()

    registry = session.registry

    # One token, end to end
    token = registry.get_token("sys.color.action.primary.default")
    if token:
        print(f"Token: {token.id}")
        print(f"  Type: {token.type}")
        print(f"  Value: {token.value} (from {token.original_value})")
        print(f"  Themes: {token.override_themes}")
        for fmt, output in token.outputs.items():
            print(f"  {fmt}: {output.name} -> {output.usage}")
        print()

    # Composite expansion
    heading = registry.get_token("sys.typography.heading.xl")
    if heading:
        print(f"Composite: {heading.id}")
        for child_id in heading.children:
            child = registry.get_token(child_id)
            print(f"  {child_id}: {child.type} = {child.value}")
        print()

    # Impact analysis
    print("Changing ref.color.blue.500 affects:")
    for affected in registry.get_impact("ref.color.blue.500"):
        print(f"  {affected}")
    print()

    stats = compute_stats(registry)
    print(f"Coverage: {stats['coverage']['percentage']}%")
    print(f"Reference density: {stats['references']['density']}")


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
