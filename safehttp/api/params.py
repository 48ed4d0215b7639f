"""Demo endpoints reading typed parameters through Form."""

from pydantic import BaseModel
from robyn import Response

from safehttp.core.logger import LogIcon, logger
from safehttp.core.router import Router, error_response
from safehttp.models.core import SliceKind
from safehttp.models.form import Form
from safehttp.models.status import StatusCode

router = Router(__file__, prefix="/params")


class EchoResponse(BaseModel):
    """Typed echo of the query parameters."""

    name: str
    page: int
    limit: int
    ratio: float
    verbose: bool
    tags: list[str]
    ids: list[int]


def read_echo_params(form: Form) -> EchoResponse | Response:
    """Read typed parameters, or build a 400 response when any of them fails to convert."""
    # Slices first: a slice on an absent key resets the error slot.
    tags: list[str] = []
    ids: list[int] = []
    form.slice(tags, "tag", SliceKind.STRING)
    form.slice(ids, "id", SliceKind.INT64)

    result = EchoResponse(
        name=form.string("name", ""),
        page=form.int64("page", 1),
        limit=form.uint64("limit", 20),
        ratio=form.float64("ratio", 1.0),
        verbose=form.bool("verbose", False),
        tags=tags,
        ids=ids,
    )
    if err := form.err():
        logger.info("Rejected echo parameters", icon=LogIcon.VALIDATION, error=str(err))
        return error_response(StatusCode.BAD_REQUEST, str(err))
    return result


@router.get("/echo")
async def echo(form: Form):
    return read_echo_params(form), StatusCode.OK
