"""Lambda adapter for setting logging context from the invocation context."""

from typed_lambda.logging.context import set_correlation_id, set_extra_context
from typed_lambda.types import LambdaContext


def bind_lambda_context(context: LambdaContext) -> None:
    """Set logging context from a Lambda invocation context.

    Attributes that are missing or not strings are skipped, so partial
    contexts supplied by local runners and tests are accepted.

    Args:
        context: Lambda context object.
    """
    request_id = getattr(context, "aws_request_id", None)
    if isinstance(request_id, str):
        set_correlation_id(request_id)

    fields: dict[str, str] = {}
    for name in ("function_name", "function_version"):
        value = getattr(context, name, None)
        if isinstance(value, str):
            fields[name] = value
    if fields:
        set_extra_context(**fields)
