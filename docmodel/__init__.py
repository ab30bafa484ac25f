import importlib

mod = "docmodel"
class LazyLoader:
    """
    Lazy loader for the docmodel functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        try:
            return self._load_module(f"{mod}.{item}")
        except ModuleNotFoundError as e:
            raise AttributeError(f"module {mod!r} has no attribute {item!r}") from e

# Define the functions and their corresponding module paths
_mappings = {
    "normalize_type": (f"{mod}.doctojsons", "normalize_type"),
    "canonical_type_name": (f"{mod}.doctojsons", "canonical_type_name"),
    "register_type_alias": (f"{mod}.doctojsons", "register_type_alias"),
    "translate": (f"{mod}.doctojsons", "translate"),
    "extract_fields": (f"{mod}.doctojsons", "extract_fields"),
    "convert_docmodel_to_json_schema": (f"{mod}.doctojsons", "convert_docmodel_to_json_schema"),
    "convert_docmodel_to_json_schema_string": (f"{mod}.doctojsons", "convert_docmodel_to_json_schema_string"),
    "Schema": (f"{mod}.schema", "Schema"),
    "Types": (f"{mod}.schema", "Types"),
    "FieldDescriptor": (f"{mod}.schema", "FieldDescriptor"),
    "DocModelError": (f"{mod}.schema", "DocModelError"),
    "load_docmodel": (f"{mod}.schema", "load_docmodel"),
    "load_docmodel_file": (f"{mod}.schema", "load_docmodel_file"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
