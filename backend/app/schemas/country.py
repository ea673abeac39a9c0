from backend.app.schemas.base import ApiModel


class Country(ApiModel):
    code: str
    name: str
    states: list[str]
    major_cities: list[str]
