import pytest

from lcmgen.codegen.core.config import GeneratorConfig
from lcmgen.codegen.languages.go import GoGenerator, create_go_generator
from lcmgen.codegen.languages.python import PythonGenerator, create_python_generator
from lcmgen.codegen.languages.rust import RustGenerator, create_rust_generator
from lcmgen.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
)


def test_bundled_languages():
    assert list_supported_languages() == ["go", "python", "rust"]
    assert isinstance(get_generator("py"), PythonGenerator)
    assert isinstance(get_generator("rs"), RustGenerator)
    assert isinstance(get_generator("golang"), GoGenerator)


def test_aliases_get_language_defaults():
    assert get_generator("golang").config.use_tabs
    assert get_generator("rs").crate_root == "crate"


def test_config_forms(tmp_path):
    assert get_generator("python", {"package_prefix": "gen"}).config.package_prefix == "gen"

    config = GeneratorConfig(indent_size=2)
    assert get_generator("python", config).config is config

    path = tmp_path / "go.json"
    path.write_text('{"module_path": "example.com/m"}', encoding="utf-8")
    assert get_generator("go", str(path)).module_path == "example.com/m"

    with pytest.raises(RegistryError, match="Invalid config type"):
        get_generator("go", 42)

    with pytest.raises(RegistryError, match="Failed to create"):
        get_generator("go", tmp_path / "missing.json")


def test_unknown_language():
    assert not is_language_supported("cobol")
    with pytest.raises(RegistryError, match="Available: go, python, rust"):
        get_generator("cobol")


def test_language_info():
    info = get_language_info("golang")
    assert info["name"] == "go"
    assert info["file_extension"] == ".go"
    assert info["aliases"] == ["golang"]
    assert info["class"] == "GoGenerator"

    assert set(list_all_language_info()) == {"go", "python", "rust"}


class TestRegistry:
    def test_register_and_unregister(self):
        registry = GeneratorRegistry()
        registry.register("python", PythonGenerator, aliases=["py", "python3"])

        assert registry.resolve("PY") == "python"
        assert registry.list_all_names() == {"python": ["python", "py", "python3"]}

        registry.unregister("python")
        assert not registry.is_supported("py")

    def test_rejects_non_generators(self):
        with pytest.raises(RegistryError):
            GeneratorRegistry().register("text", str)

    def test_alias_conflicts(self):
        registry = GeneratorRegistry()
        registry.register("python", PythonGenerator, aliases=["py"])
        registry.register("rust", RustGenerator)

        with pytest.raises(RegistryError, match="already points to"):
            registry.register("go", GoGenerator, aliases=["py"])
        with pytest.raises(RegistryError, match="conflicts"):
            registry.register("golang", GoGenerator, aliases=["rust"])

    def test_existing_registration_kept_unless_replaced(self):
        registry = GeneratorRegistry()
        registry.register("lang", PythonGenerator)
        registry.register("lang", RustGenerator)
        assert registry.get_generator_class("lang") is PythonGenerator

        registry.register("lang", RustGenerator, replace=True)
        assert registry.get_generator_class("lang") is RustGenerator


def test_factories_use_language_defaults():
    assert create_python_generator().python_config.runtime_module == "lcmgen.runtime"
    assert create_rust_generator().crate_root == "crate"
    assert create_go_generator().config.use_tabs

    config = GeneratorConfig(custom={"crate_root": "msgs"})
    assert create_rust_generator(config).crate_root == "msgs"
