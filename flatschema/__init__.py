import importlib

mod = "flatschema"
class LazyLoader:
    """
    Lazy loader for the flatschema functions; pandas is only imported on first use.
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
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "analyze": (f"{mod}.analyzer", "analyze"),
    "convert_csv_to_schema": (f"{mod}.analyzer", "convert_csv_to_schema"),
    "SchemaAnalyzer": (f"{mod}.analyzer", "SchemaAnalyzer"),
    "AnalysisRequest": (f"{mod}.analyzer", "AnalysisRequest"),
    "AnalysisResult": (f"{mod}.analyzer", "AnalysisResult"),
    "merge_structures": (f"{mod}.structuremerger", "merge_structures"),
    "generate_standard_schema": (f"{mod}.structuretojsons", "generate_standard_schema"),
    "generate_segmented_schema": (f"{mod}.structuretosegments", "generate_segmented_schema"),
    "generate_header_record_schema": (f"{mod}.structuretoheaderrecord", "generate_header_record_schema"),
    "AnalyzerError": (f"{mod}.errors", "AnalyzerError"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
