"""Tests for runtime provider discovery."""

import importlib

import pytest

from services import (
    DEFAULT_LOADER,
    ResourceLoader,
    ServiceConfigurationError,
    ServiceLoader,
    bind_loader,
    current_loader,
    get_loader,
    service_provider,
)


def write_registry(tree, contract: str, text: str) -> None:
    path = tree.root / "META-INF" / "services" / tree.name(contract)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tree.name(text), encoding="utf-8")


@pytest.fixture
def greeter(greeter_tree):
    module = importlib.import_module(greeter_tree.name("{pkg}.spi"))
    return module.Greeter


class TestServiceLoader:
    """Test the ServiceLoader class."""

    def test_iterates_in_registry_order(self, greeter_tree, greeter):
        """Test that providers are instantiated in file order."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.impl.FrenchGreeter\n{pkg}.impl.EnglishGreeter\n")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        assert [g.greet("Ada") for g in loader] == ["Bonjour, Ada", "Hello, Ada"]

    def test_comments_blanks_and_duplicates(self, greeter_tree, greeter):
        """Test that comments and blank lines are skipped and duplicates dropped."""
        write_registry(
            greeter_tree,
            "{pkg}.spi.greeter.Greeter",
            "# providers\n\n  {pkg}.impl.EnglishGreeter  # default\n{pkg}.impl.EnglishGreeter\n",
        )
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        assert loader.provider_names() == [greeter_tree.name("{pkg}.impl.EnglishGreeter")]

    def test_instances_are_cached_until_reload(self, greeter_tree, greeter):
        """Test that iteration is restartable and reload() drops instances."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.impl.EnglishGreeter\n")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        first = loader.find_first()
        assert loader.find_first() is first
        assert list(loader) == [first]
        loader.reload()
        assert loader.find_first() is not first

    def test_nothing_registered(self, greeter_tree, greeter):
        """Test that a contract without a registry file has no providers."""
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        assert list(loader) == []
        assert loader.find_first() is None

    def test_stream_is_lazy(self, greeter_tree, greeter):
        """Test that stream() resolves types without instantiating."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.impl.EnglishGreeter\n")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        handles = list(loader.stream())
        assert [h.type.__name__ for h in handles] == ["EnglishGreeter"]
        assert handles[0]._instance is None
        assert handles[0].get() is handles[0].get()

    def test_files_from_several_roots(self, greeter_tree, greeter, tmp_path):
        """Test that every root contributes, first root first."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.impl.FrenchGreeter\n")
        other = tmp_path / "other"
        path = other / "META-INF" / "services" / greeter_tree.name("{pkg}.spi.greeter.Greeter")
        path.parent.mkdir(parents=True)
        path.write_text(greeter_tree.name("{pkg}.impl.EnglishGreeter\n"), encoding="utf-8")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root, other]))
        assert [type(g).__name__ for g in loader] == ["FrenchGreeter", "EnglishGreeter"]


class TestServiceLoaderErrors:
    """Test configuration errors raised during iteration."""

    def test_missing_provider(self, greeter_tree, greeter):
        """Test that an unknown provider name raises."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.impl.Missing\n")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        with pytest.raises(ServiceConfigurationError, match="not found"):
            list(loader)

    def test_not_a_subtype(self, greeter_tree, greeter):
        """Test that a provider of the wrong type raises."""
        greeter_tree.write({"{pkg}/other.py": "class Stranger:\n    pass\n"})
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.other.Stranger\n")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        with pytest.raises(ServiceConfigurationError, match="not a subtype"):
            list(loader)

    def test_illegal_name(self, greeter_tree, greeter):
        """Test that a malformed line raises."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "not a name\n")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        with pytest.raises(ServiceConfigurationError, match="Illegal provider-class name"):
            loader.provider_names()

    def test_constructor_failure(self, greeter_tree, greeter):
        """Test that a provider raising in __init__ is wrapped."""
        greeter_tree.write({
            "{pkg}/fragile.py": """
                from {pkg}.spi import Greeter


                class Fragile(Greeter):
                    def __init__(self):
                        raise ValueError("no")

                    def greet(self, name):
                        return name
            """,
        })
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.fragile.Fragile\n")
        loader = ServiceLoader(greeter, ResourceLoader([greeter_tree.root]))
        with pytest.raises(ServiceConfigurationError, match="could not be instantiated") as excinfo:
            loader.find_first()
        assert isinstance(excinfo.value.__cause__, ValueError)


class TestLoadingContext:
    """Test binding of the loading context."""

    def test_default_loader(self):
        """Test that the default loader is used when nothing is bound."""
        assert current_loader() is None
        assert get_loader() is DEFAULT_LOADER

    def test_bind_loader(self, greeter_tree, greeter):
        """Test that load() picks up the bound loader and the binding is undone."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.impl.EnglishGreeter\n")
        bound = ResourceLoader([greeter_tree.root])
        with bind_loader(bound):
            loader = ServiceLoader.load(greeter)
            assert loader.loader is bound
            assert type(loader.find_first()).__name__ == "EnglishGreeter"
        assert current_loader() is None

    def test_default_loader_searches_sys_path(self, greeter_tree, greeter):
        """Test that the default loader finds files under sys.path entries."""
        write_registry(greeter_tree, "{pkg}.spi.greeter.Greeter", "{pkg}.impl.EnglishGreeter\n")
        assert type(ServiceLoader.load(greeter).find_first()).__name__ == "EnglishGreeter"


class TestServiceProviderMarker:
    """Test the runtime marker."""

    def test_marker_is_recorded(self):
        """Test that the marker records its arguments on the class."""

        @service_provider(int, generate_factory=True)
        class Impl:
            pass

        assert Impl.__service_provider__.value is int
        assert Impl.__service_provider__.generate_factory is True

    def test_marker_rejects_functions(self):
        """Test that only classes can be marked."""
        with pytest.raises(TypeError):
            service_provider(int)(lambda: None)
