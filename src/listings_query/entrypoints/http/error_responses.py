"""REST API error response models.

Structured error responses that provide consistent format for all HTTP errors.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Individual error detail for field-level errors."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "market",
                "message": "Must be one of: listing, all, advisor, cpa",
                "code": "UNRECOGNIZED_KIND",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Examples:
        Unknown market:
            {
                "detail": "Listing kind 'spaceship' does not exist",
                "code": "UNRECOGNIZED_KIND",
                "errors": [
                    {
                        "field": "market",
                        "message": "Must be one of: listing, all, advisor, cpa",
                        "code": "UNRECOGNIZED_KIND"
                    }
                ]
            }

        Malformed filter value:
            {
                "detail": "max_aum must be a number, got 'lots'",
                "code": "INVALID_VALUE"
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "detail": "Listing kind 'spaceship' does not exist",
                    "code": "UNRECOGNIZED_KIND",
                    "errors": [
                        {
                            "field": "market",
                            "message": "Must be one of: listing, all, advisor, cpa",
                            "code": "UNRECOGNIZED_KIND",
                        }
                    ],
                },
                {"detail": "max_aum must be a number, got 'lots'", "code": "INVALID_VALUE"},
            ]
        }
    )
