"""Natural-language extraction: classifier first, heuristics as fallback."""
