import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from contentcrawl.domain.crawl_options import CrawlOptions
from contentcrawl.exceptions import UserInputError
from contentcrawl.services.input_schema import InputSchema, default_input_schema
from contentcrawl.utils.pattern_utils import join_patterns

logger = logging.getLogger(__name__)

DOCUMENTATION_SELECTORS = (
    ".sidebar, .navigation, .toc, .breadcrumb",
    ".search-box, .search-results",
    ".advertisement, .ads, .sponsor",
    ".comment-section, .comments",
    ".related-posts, .suggestions",
    ".footer-nav, .footer-links",
    ".social-share, .share-buttons",
    ".version-selector, .language-selector",
    ".edit-button, .contribute-link",
)

DOCUMENTATION_MAX_DEPTH = 3
DOCUMENTATION_MAX_PAGES_PER_DOMAIN = 50

RANGE_FIELDS = (
    "maxResults",
    "requestTimeoutSecs",
    "serpMaxRetries",
    "desiredConcurrency",
    "maxRequestRetries",
    "maxDepth",
    "maxPagesPerDomain",
)

BOOLEAN_FIELDS = (
    "removeCookieWarnings",
    "debugMode",
    "documentationMode",
    "enableRecursiveCrawling",
    "followInternalLinks",
    "followExternalLinks",
)

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


def _is_http_url(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


class InputNormalizer:
    """Validate raw crawl input and fill defaults from the input schema.

    Responsibility: turn a caller-supplied mapping into a `CrawlOptions`.
    The mapping is never mutated. Out-of-range numbers are clamped with a
    warning; a missing query or an invalid enumerated value raises
    `UserInputError`.
    """

    def __init__(self, schema: Optional[InputSchema] = None):
        self.schema = schema or default_input_schema()

    def _to_number(self, value: Any, field_name: str):
        if isinstance(value, bool):
            raise UserInputError(f"The `{field_name}` parameter must be a number, but was {value!r}.", field=field_name)
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise UserInputError(
                    f"The `{field_name}` parameter must be a number, but was {value!r}.", field=field_name
                ) from None
            return int(number) if number.is_integer() else number
        raise UserInputError(f"The `{field_name}` parameter must be a number, but was {value!r}.", field=field_name)

    def validate_range(self, value: Any, field_name: str):
        """Return `value` as a number within the field's declared bounds.

        Missing values take the schema default. Numeric strings are coerced.
        """
        spec = self.schema[field_name]
        if value is None:
            logger.info("The `%s` parameter is not defined. Using the default value %s.", field_name, spec.default)
            return spec.default
        number = self._to_number(value, field_name)
        if spec.minimum is not None and number < spec.minimum:
            logger.warning("The `%s` parameter must be at least %s, but was %s. Using %s instead.", field_name, spec.minimum, number, spec.minimum)
            number = spec.minimum
        elif spec.maximum is not None and number > spec.maximum:
            logger.warning("The `%s` parameter must be at most %s, but was %s. Using %s instead.", field_name, spec.maximum, number, spec.maximum)
            number = spec.maximum
        if spec.type == "integer":
            return int(number)
        return number

    def _validate_bool(self, value: Any, field_name: str) -> bool:
        if value is None:
            return bool(self.schema.default(field_name))
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS + _FALSE_STRINGS:
            return value.strip().lower() in _TRUE_STRINGS
        raise UserInputError(f"The `{field_name}` parameter must be a boolean, but was {value!r}.", field=field_name)

    def _validate_choice(self, value: Any, field_name: str) -> str:
        spec = self.schema[field_name]
        if not value:
            return spec.default
        if value not in spec.enum:
            allowed = " or ".join(f"`{v}`" for v in spec.enum)
            raise UserInputError(f"The `{field_name}` parameter must be either {allowed}.", field=field_name)
        return value

    def _validate_output_formats(self, value: Any) -> tuple[str, ...]:
        spec = self.schema["outputFormats"]
        if isinstance(value, str):
            value = [v.strip() for v in value.split(",") if v.strip()]
        elif value is not None and not isinstance(value, (list, tuple)):
            raise UserInputError(
                f"The `outputFormats` parameter must be an array of strings, but was {value!r}.", field="outputFormats"
            )
        if not value:
            logger.info("The `outputFormats` parameter is not defined. Using default value `%s`.", spec.default)
            return tuple(spec.default)
        if any(fmt not in spec.enum for fmt in value):
            allowed = ", ".join(f"`{v}`" for v in spec.enum)
            raise UserInputError(f"The `outputFormats` array may only contain {allowed}.", field="outputFormats")
        return tuple(value)

    def _default_if_missing(self, raw: Mapping[str, Any], field_name: str):
        value = raw.get(field_name)
        if value is None:
            return self.schema.default(field_name)
        return value

    def normalize(self, raw_input: Optional[Mapping[str, Any]], standby_init: bool = False) -> CrawlOptions:
        """Return validated `CrawlOptions` for `raw_input`.

        `query` is required unless `standby_init` is set; in standby mode the
        query is validated later, when a request supplies one.
        """
        raw = dict(raw_input or {})

        query = raw.get("query")
        if query is not None and not isinstance(query, str):
            raise UserInputError(f"The `query` parameter must be a string, but was {query!r}.", field="query")
        if query is not None:
            query = query.strip()
        if not query and not standby_init:
            raise UserInputError("The `query` parameter must be provided and non-empty.", field="query")

        numbers = {name: self.validate_range(raw.get(name), name) for name in RANGE_FIELDS}
        flags = {name: self._validate_bool(raw.get(name), name) for name in BOOLEAN_FIELDS}

        output_formats = self._validate_output_formats(raw.get("outputFormats"))
        serp_proxy_group = self._validate_choice(raw.get("serpProxyGroup"), "serpProxyGroup")
        scraping_tool = self._validate_choice(raw.get("scrapingTool"), "scrapingTool")

        request_timeout_secs = numbers["requestTimeoutSecs"]
        dynamic_wait = raw.get("dynamicContentWaitSecs")
        dynamic_wait = self._to_number(dynamic_wait, "dynamicContentWaitSecs") if dynamic_wait is not None else None
        if not dynamic_wait or dynamic_wait >= request_timeout_secs:
            # half the timeout, rounding .5 up
            dynamic_wait = int(request_timeout_secs / 2 + 0.5)

        readable_threshold = raw.get("readableTextCharThreshold")
        if readable_threshold is None:
            readable_threshold = self.schema.default("readableTextCharThreshold")
        else:
            readable_threshold = int(self._to_number(readable_threshold, "readableTextCharThreshold"))

        remove_selector = raw.get("removeElementsCssSelector") or self.schema.default("removeElementsCssSelector")
        max_depth = numbers["maxDepth"]
        max_pages_per_domain = numbers["maxPagesPerDomain"]
        recursive = flags["enableRecursiveCrawling"]

        if flags["documentationMode"]:
            remove_selector = ", ".join(s for s in (remove_selector,) + DOCUMENTATION_SELECTORS if s)
            recursive = True
            # only raise limits the caller left unset
            if raw.get("maxDepth") is None and max_depth == self.schema.default("maxDepth"):
                max_depth = DOCUMENTATION_MAX_DEPTH
            if raw.get("maxPagesPerDomain") is None and max_pages_per_domain == self.schema.default("maxPagesPerDomain"):
                max_pages_per_domain = DOCUMENTATION_MAX_PAGES_PER_DOMAIN

        proxy_configuration = raw.get("proxyConfiguration") or self.schema.default("proxyConfiguration") or {}

        return CrawlOptions(
            query=query or None,
            base_url=query if _is_http_url(query) else None,
            max_results=numbers["maxResults"],
            output_formats=output_formats,
            request_timeout_secs=request_timeout_secs,
            serp_proxy_group=serp_proxy_group,
            serp_max_retries=numbers["serpMaxRetries"],
            proxy_configuration=dict(proxy_configuration),
            scraping_tool=scraping_tool,
            remove_elements_css_selector=remove_selector,
            html_transformer=raw.get("htmlTransformer") or self.schema.default("htmlTransformer"),
            desired_concurrency=numbers["desiredConcurrency"],
            max_request_retries=numbers["maxRequestRetries"],
            dynamic_content_wait_secs=dynamic_wait,
            readable_text_char_threshold=readable_threshold,
            remove_cookie_warnings=flags["removeCookieWarnings"],
            debug_mode=flags["debugMode"],
            documentation_mode=flags["documentationMode"],
            enable_recursive_crawling=recursive,
            max_depth=max_depth,
            max_pages_per_domain=max_pages_per_domain,
            follow_internal_links=flags["followInternalLinks"],
            follow_external_links=flags["followExternalLinks"],
            include_patterns=join_patterns(self._default_if_missing(raw, "includePatterns")),
            exclude_patterns=join_patterns(self._default_if_missing(raw, "excludePatterns")),
        )


def normalize(raw_input: Optional[Mapping[str, Any]], standby_init: bool = False) -> CrawlOptions:
    return InputNormalizer().normalize(raw_input, standby_init=standby_init)
