from kemono_harvest.extractors.post_api import PostApiExtractor
from kemono_harvest.extractors.post_html import PostHtmlExtractor


def get_extractor(extractor_type: str):
    """
    Factory Pattern: pick the extractor class for a source type.
    The flow does not need to know which extractors exist.
    """
    extractors_map = {
        "html": PostHtmlExtractor,
        "api": PostApiExtractor,
    }

    extractor_class = extractors_map.get(extractor_type)

    if not extractor_class:
        raise ValueError(f"Extractor '{extractor_type}' is not registered in the factory.")

    return extractor_class
