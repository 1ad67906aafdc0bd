"""Runtime loader embedded at the top of every bundle artifact.

The preamble defines two functions:

``_define(name, filename, source, package)``
    Compiles a lowered module once and returns its module function, which
    takes the injected ``require``/``module``/``exports`` bindings and runs
    the code with ``exports`` (the module ``__dict__``) as its globals.

``_bundle(modules)``
    Takes the registry ``{identity: (module function, specifier map, parent)}``
    and requires the entry identity. Each identity moves from unloaded to
    loading to loaded. A module required while it is still loading (a circular
    import) hands back its partially populated module object. A loaded
    submodule is bound as an attribute of its parent package, and
    ``from pkg import name`` falls back to the submodule ``pkg.name`` when
    ``pkg`` has no such attribute.
"""

from __future__ import annotations

from string import Template

from contract.artifacts import ENTRY_IDENTITY, REQUIRE_BINDING, STAR_IMPORT

_PREAMBLE = Template('''\
import types as _types

_missing = object()


def _public_names(module):
    names = getattr(module, "__all__", None)
    if names is None:
        names = [name for name in vars(module) if not name.startswith("_")]
    return {name: getattr(module, name) for name in names}


def _define(name, filename, source, package=None):
    code = compile(source, filename, "exec", dont_inherit=True)

    def module_function(require, module, exports):
        exports["__name__"] = name
        exports["__file__"] = filename
        exports["__package__"] = package
        exports["$require"] = require
        exec(code, exports)

    return module_function


def _bundle(modules):
    loading = {}
    loaded = {}

    def require(identity):
        if identity in loaded:
            return loaded[identity]
        if identity in loading:
            return loading[identity]

        function, mapping, parent = modules[identity]
        module = _types.ModuleType("<bundle %d>" % identity)
        loading[identity] = module

        def local_require(specifier, name=None):
            target = require(mapping[specifier])
            if name is None:
                return target
            if name == "$star":
                return _public_names(target)
            value = getattr(target, name, _missing)
            if value is not _missing:
                return value
            submodule = mapping.get("%s.%s" % (specifier, name))
            if submodule is not None:
                return require(submodule)
            message = "cannot import name %r from %r" % (name, target.__name__)
            if mapping[specifier] in loading:
                message += " (most likely due to a circular import)"
            raise ImportError(message, name=target.__name__)

        try:
            function(local_require, module, module.__dict__)
        finally:
            del loading[identity]
        loaded[identity] = module
        if parent is not None:
            package_identity, attribute = parent
            package = loaded.get(package_identity, loading.get(package_identity))
            if package is not None:
                setattr(package, attribute, module)
        return module

    return require($entry)
''')


def render_preamble() -> str:
    """Return the loader source, bound to the contract constants."""
    return _PREAMBLE.substitute(
        require=REQUIRE_BINDING,
        star=STAR_IMPORT,
        entry=ENTRY_IDENTITY,
    )


LOADER_PREAMBLE = render_preamble()

__all__ = ["LOADER_PREAMBLE", "render_preamble"]
