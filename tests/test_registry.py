"""Tests for registry aggregation, the filer and the registry writer."""

import io

import pytest

from contracts import ProviderBinding, RegistryEntry, TypeElement
from diagnostics import Messager
from registry import Filer, FilerError, RegistryAggregator, RegistryWriter, read_registry_lines, render_registry


def binding(contract: str, impl: str, generate_factory: bool = False) -> ProviderBinding:
    module, _, name = contract.rpartition(".")
    impl_module, _, impl_name = impl.rpartition(".")
    return ProviderBinding(
        contract=TypeElement(module=module, qualname=name),
        implementation=TypeElement(module=impl_module, qualname=impl_name),
        generate_factory=generate_factory,
    )


@pytest.fixture
def filer(tmp_path):
    return Filer(class_output=tmp_path / "classes", source_output=tmp_path / "generated")


class TestReadRegistryLines:
    """Test reading of existing registry files."""

    def test_strips_terminators_only(self):
        """Test that lines keep comments, blanks and whitespace."""
        reader = io.StringIO("a.B\n# note\n\n  c.D  \nlast")
        assert read_registry_lines(reader) == ["a.B", "# note", "", "  c.D  ", "last"]


class TestRegistryAggregator:
    """Test the RegistryAggregator class."""

    def test_groups_by_contract_in_discovery_order(self):
        """Test grouping and ordering."""
        aggregator = RegistryAggregator()
        aggregator.add(binding("s.Codec", "i.Zip"))
        aggregator.add(binding("s.Store", "i.Disk"))
        aggregator.add(binding("s.Codec", "i.Gzip"))
        entries = {e.contract_name: e.implementations for e in aggregator.entries}
        assert entries == {"s.Codec": ["i.Zip", "i.Gzip"], "s.Store": ["i.Disk"]}
        assert "s.Codec" in aggregator
        assert aggregator.get_contract("s.Store").simple_name == "Store"

    def test_duplicate_provider_added_once(self):
        """Test that the same provider is listed once."""
        aggregator = RegistryAggregator()
        aggregator.add(binding("s.Codec", "i.Zip"))
        aggregator.add(binding("s.Codec", "i.Zip"))
        assert aggregator.entries[0].implementations == ["i.Zip"]

    def test_factory_requested_by_first_provider_only(self):
        """Test that only the first provider of a contract can request a factory."""
        aggregator = RegistryAggregator()
        first = aggregator.add(binding("s.Codec", "i.Zip", generate_factory=True))
        second = aggregator.add(binding("s.Codec", "i.Gzip", generate_factory=True))
        aggregator.add(binding("s.Store", "i.Disk", generate_factory=False))
        aggregator.add(binding("s.Store", "i.Cloud", generate_factory=True))
        assert first is not None and first.contract.qualified_name == "s.Codec"
        assert second is None
        assert [r.contract.qualified_name for r in aggregator.generation_requests] == ["s.Codec"]

    def test_merge_existing(self, filer):
        """Test that names on disk are appended after round names."""
        resource = filer.resource_path(filer.registry_resource("s.Codec"))
        resource.parent.mkdir(parents=True)
        resource.write_text("i.Old\ni.Zip\n", encoding="utf-8")
        aggregator = RegistryAggregator()
        aggregator.add(binding("s.Codec", "i.Zip"))
        aggregator.merge_existing(filer, Messager())
        assert aggregator.entries[0].implementations == ["i.Zip", "i.Old"]

    def test_merge_missing_file_is_silent(self, filer):
        """Test that a missing registry file is treated as empty."""
        messager = Messager()
        aggregator = RegistryAggregator()
        aggregator.add(binding("s.Codec", "i.Zip"))
        aggregator.merge_existing(filer, messager)
        assert aggregator.entries[0].implementations == ["i.Zip"]
        assert not messager.diagnostics

    def test_merge_unreadable_file_is_reported(self, filer):
        """Test that an undecodable registry file produces a diagnostic."""
        resource = filer.resource_path(filer.registry_resource("s.Codec"))
        resource.parent.mkdir(parents=True)
        resource.write_bytes(b"\xff\xfe\xfa\n")
        messager = Messager()
        aggregator = RegistryAggregator()
        aggregator.add(binding("s.Codec", "i.Zip"))
        aggregator.merge_existing(filer, messager)
        assert messager.error_count == 1
        assert aggregator.entries[0].implementations == ["i.Zip"]


class TestFiler:
    """Test the Filer class."""

    def test_registry_resource_name(self, filer):
        """Test the registry file location."""
        assert filer.registry_resource("a.b.C") == "META-INF/services/a.b.C"

    def test_source_path(self, filer, tmp_path):
        """Test module paths under the source output."""
        assert filer.source_path("a.b", "c_factory") == tmp_path / "generated" / "a" / "b" / "c_factory.py"
        assert filer.source_path("", "c_factory") == tmp_path / "generated" / "c_factory.py"

    def test_create_source_file_once(self, filer):
        """Test that a module can only be created once per filer."""
        with filer.create_source_file("a", "mod") as writer:
            writer.write("x = 1\n")
        with pytest.raises(FilerError):
            filer.create_source_file("a", "mod")
        assert filer.created_sources == {"a.mod"}

    def test_generated_package_gets_no_init(self, filer):
        """Test that package directories are created without __init__.py."""
        with filer.create_source_file("a.b", "mod") as writer:
            writer.write("")
        assert not (filer.source_path("a.b", "mod").parent / "__init__.py").exists()

    def test_resources_can_be_rewritten(self, filer):
        """Test that resources are replaced on every write."""
        name = filer.registry_resource("a.C")
        for text in ("first\n", "second\n"):
            with filer.create_resource(name) as writer:
                writer.write(text)
        with filer.get_resource(name) as reader:
            assert reader.read() == "second\n"

    def test_get_missing_resource(self, filer):
        """Test that reading a missing resource raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            filer.get_resource(filer.registry_resource("a.C"))


class TestRegistryWriter:
    """Test the RegistryWriter class."""

    def test_render(self):
        """Test that every name is newline-terminated."""
        entry = RegistryEntry(contract_name="s.C", implementations=["i.A", "i.B"])
        assert render_registry(entry) == "i.A\ni.B\n"

    def test_write(self, filer):
        """Test that files are written and empty entries skipped."""
        writer = RegistryWriter(filer, Messager())
        written = writer.write([
            RegistryEntry(contract_name="s.C", implementations=["i.A"]),
            RegistryEntry(contract_name="s.Empty"),
        ])
        path = filer.resource_path("META-INF/services/s.C")
        assert written == [path]
        assert path.read_bytes() == b"i.A\n"
        assert not filer.resource_path("META-INF/services/s.Empty").exists()

    def test_write_failure_is_reported(self, tmp_path):
        """Test that an unwritable resource produces a diagnostic."""
        blocker = tmp_path / "classes"
        blocker.write_text("not a directory", encoding="utf-8")
        messager = Messager()
        writer = RegistryWriter(Filer(class_output=blocker, source_output=tmp_path), messager)
        written = writer.write([RegistryEntry(contract_name="s.C", implementations=["i.A"])])
        assert written == []
        assert messager.error_count == 1
        assert messager.diagnostics[0].message.startswith("Could not write")
