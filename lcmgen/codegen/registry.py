"""
Registry of target languages.

Maps language names and aliases to generator classes and builds generators
with the configuration defaults of their language.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from .core.config import ConfigError, GeneratorConfig, load_config
from .core.generator import CodeGenerator

ConfigSource = Union[GeneratorConfig, Dict[str, Any], str, Path, None]


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


@dataclass
class LanguageEntry:
    """A registered target language."""

    name: str
    generator_class: Type[CodeGenerator]
    aliases: List[str] = field(default_factory=list)


class GeneratorRegistry:
    """Lookup table from language names and aliases to generators."""

    def __init__(self):
        self._languages: Dict[str, LanguageEntry] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator for a language.

        An existing registration is kept unless ``replace`` is set.

        Raises:
            RegistryError: If the class is not a CodeGenerator or an alias
                collides with another language
        """
        if not (isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        name = language.lower()
        if name in self._languages and not replace:
            return

        alias_keys = []
        for alias in aliases or []:
            key = alias.lower()
            if key == name or key in alias_keys:
                continue
            if not replace:
                if key in self._languages:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing primary language"
                    )
                target = self._aliases.get(key)
                if target is not None and target != name:
                    raise RegistryError(f"Alias '{alias}' already points to '{target}'")
            alias_keys.append(key)

        if name in self._languages:
            self.unregister(name)

        self._languages[name] = LanguageEntry(name, generator_class, alias_keys)
        for key in alias_keys:
            self._aliases[key] = name

    def unregister(self, language: str):
        """Remove a language and every alias pointing at it."""
        name = language.lower()
        self._languages.pop(name, None)
        self._aliases = {
            alias: target for alias, target in self._aliases.items() if target != name
        }

    def resolve(self, language: str) -> str:
        """Primary language name for a name or alias."""
        key = language.lower()
        key = self._aliases.get(key, key)
        if key not in self._languages:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )
        return key

    def is_supported(self, language: str) -> bool:
        key = language.lower()
        return key in self._languages or key in self._aliases

    def get_generator_class(self, language: str) -> Type[CodeGenerator]:
        return self._languages[self.resolve(language)].generator_class

    def create_generator(
        self, language: str, config: ConfigSource = None
    ) -> CodeGenerator:
        """
        Create a generator instance for a language.

        Args:
            language: Language name or alias
            config: A GeneratorConfig used as is, a dict of overrides or the
                path of a JSON config file; both are applied on top of the
                language defaults

        Raises:
            RegistryError: If the language is unknown or the configuration
                cannot be loaded
        """
        name = self.resolve(language)
        generator_class = self._languages[name].generator_class

        if config is not None and not isinstance(
            config, (GeneratorConfig, dict, str, Path)
        ):
            raise RegistryError(f"Invalid config type: {type(config)}")

        try:
            if isinstance(config, GeneratorConfig):
                final_config = config
            elif isinstance(config, dict):
                final_config = load_config(name, custom_config=config)
            else:
                final_config = load_config(name, config_file=config)
        except ConfigError as e:
            raise RegistryError(f"Failed to create {language} generator: {e}") from e

        return generator_class(final_config)

    def list_languages(self) -> List[str]:
        """Registered primary language names, sorted."""
        return sorted(self._languages)

    def get_aliases_for_language(self, language: str) -> List[str]:
        entry = self._languages.get(language.lower())
        return sorted(entry.aliases) if entry else []

    def list_all_names(self) -> Dict[str, List[str]]:
        """Map each primary language to its name followed by its aliases."""
        return {
            name: [name] + self.get_aliases_for_language(name)
            for name in self._languages
        }

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """Describe a language using a generator built with its defaults."""
        name = self.resolve(language)
        generator_class = self._languages[name].generator_class
        generator = generator_class(load_config(name))

        return {
            "name": generator.language_name,
            "class": generator_class.__name__,
            "file_extension": generator.file_extension,
            "aliases": self.get_aliases_for_language(name),
            "module": generator_class.__module__,
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Get the global generator registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _register_bundled_generators(_global_registry)
    return _global_registry


def _register_bundled_generators(registry: GeneratorRegistry):
    from .languages.go import GoGenerator
    from .languages.python import PythonGenerator
    from .languages.rust import RustGenerator

    registry.register("python", PythonGenerator, aliases=["py"])
    registry.register("rust", RustGenerator, aliases=["rs"])
    registry.register("go", GoGenerator, aliases=["golang"])


# Public API functions using the global registry


def get_generator(language: str, config: ConfigSource = None) -> CodeGenerator:
    """Build a generator for ``language`` from the global registry."""
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)


def list_all_language_info() -> Dict[str, Dict[str, Any]]:
    """Information about every supported language, keyed by name."""
    result = {}
    for language in list_supported_languages():
        try:
            result[language] = get_language_info(language)
        except RegistryError:
            continue
    return result
