# mybible/routes/references_api.py
"""
API endpoints for scripture reference parsing and lookup.

Provides access to:
- Citation parsing into verse ranges
- Passage lookup (ranges plus verse text)
- Installed module listing
"""

from flask import Blueprint, request, jsonify

from mybible.services.references import (
    BibleModuleNotFoundError,
    IndexBuildError,
    ReferenceParseError,
    ReferenceService,
)
from mybible.utils.errors import (
    index_unavailable,
    invalid_reference,
    missing_parameter,
    not_found,
)

references_bp = Blueprint("references_api", __name__, url_prefix="/api/references")

# Lazily initialized service instance
_service = None


def get_service() -> ReferenceService:
    """Get or create ReferenceService instance."""
    global _service
    if _service is None:
        _service = ReferenceService()
    return _service


def set_service(service: ReferenceService) -> None:
    """Replace the service instance (used by tests and embedding apps)."""
    global _service
    _service = service


def _flag(name: str) -> bool:
    return request.args.get(name, "").lower() in ("1", "true", "yes")


@references_bp.get("/parse")
def parse_reference():
    """
    Parse a citation into verse ranges.

    Query params:
        ref: Citation (required) e.g., "John 3:16-18"
        module: Module name (optional, defaults to MYBIBLE_DEFAULT_MODULE)
        abbreviations: Use the module's own book names (optional, default false)
        mapping: Custom mapping prefix (optional)

    Returns:
        {
            "ref": "John 3:16-18",
            "module": "KJV",
            "ranges": [{"start": {...}, "end": {...}, "verse_count": 3, "start_offset": 79}]
        }
    """
    ref = request.args.get("ref")
    if not ref:
        return missing_parameter("ref")
    service = get_service()
    try:
        module = service.resolve_module_name(request.args.get("module"))
        result = service.parse(
            ref,
            module=module,
            use_module_abbreviations=_flag("abbreviations"),
            prefix=request.args.get("mapping"),
        )
    except BibleModuleNotFoundError as e:
        return not_found("module", str(e))
    except IndexBuildError as e:
        return index_unavailable(str(e))

    if not result.ok:
        return invalid_reference(result.error)

    return jsonify({
        "ref": ref,
        "module": module,
        "ranges": [r.to_dict() for r in result.ranges],
    })


@references_bp.get("/lookup")
def lookup_reference():
    """
    Look up the verses of a citation.

    Query params:
        ref: Citation (required) e.g., "Matt 28:18 - Mark 1:5"
        module: Module name (optional, defaults to MYBIBLE_DEFAULT_MODULE)
        abbreviations: Use the module's own book names (optional, default false)
        mapping: Custom mapping prefix (optional)

    Returns:
        Passage dict: ref, module, ranges, verses, verse_count
    """
    ref = request.args.get("ref")
    if not ref:
        return missing_parameter("ref")

    try:
        passage = get_service().lookup(
            ref,
            module=request.args.get("module"),
            use_module_abbreviations=_flag("abbreviations"),
            prefix=request.args.get("mapping"),
        )
    except BibleModuleNotFoundError as e:
        return not_found("module", str(e))
    except IndexBuildError as e:
        return index_unavailable(str(e))
    except ReferenceParseError as e:
        return invalid_reference(e.to_error())

    return jsonify(passage.to_dict())


@references_bp.get("/modules")
def list_modules():
    """
    List installed Bible modules.

    Returns:
        {"modules": [{"name": "KJV", "language": "en", "description": "...", "path": "..."}]}
    """
    modules = get_service().list_modules()
    return jsonify({"modules": [m.to_dict() for m in modules]})
