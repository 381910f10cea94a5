"""Print interpreter facts through the generated PropertyResolver factory.

Build the registry and the factory first:
    python scripts/build_example.py
then run:
    python -m example
"""

import sys

from rich.console import Console

from services import ServiceFactory, ServiceFactoryError
from example.spi import PropertyResolver


console = Console()


def main() -> int:
    try:
        resolver = ServiceFactory.get_instance(PropertyResolver)
    except ServiceFactoryError as e:
        console.print(f"[red]Error:[/red] {e} (run scripts/build_example.py first)")
        return 1
    if resolver is None:
        console.print("[yellow]No PropertyResolver is registered[/yellow]")
        return 1

    console.print(f"Implementation: {type(resolver).__module__}.{type(resolver).__qualname__}\n")
    console.print(f"{resolver.resolve('os.name')} ({resolver.resolve('os.version')}) - {resolver.resolve('os.arch')}")
    console.print(f"version \"{resolver.resolve('python.version')}\"")
    console.print(f"{resolver.resolve('python.implementation')} ({resolver.resolve('python.build')})")
    console.print(f"{resolver.resolve('python.compiler')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
