from marshmallow import ValidationError


def not_blank(value: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError("Must not be blank.")
