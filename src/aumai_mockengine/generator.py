"""Schema-driven fake data generation backed by Faker.

Values are chosen first by *smart field-name detection* (``email`` gets an
e-mail address, ``createdAt`` a recent timestamp, ...) and otherwise by the
declared field type.  Output is a pure function of the model, the model
directory and the options: the same seed always yields the same data.
"""

from __future__ import annotations

import re
import string
import threading
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from faker import Faker

from aumai_mockengine.models import ApiField, ApiModel, GeneratorOptions

_ARRAY_GENERIC = re.compile(r"^(?:List|Set)<(.+)>$")
_ARRAY_SUFFIX = re.compile(r"^(.+)\[\]$")

_LOCALE_ALIASES = {"en": "en_US"}
_STATUSES = ("ACTIVE", "INACTIVE", "PENDING", "COMPLETED")
_CODE_ALPHABET = string.ascii_uppercase + string.digits

# Returned by field generation when a key must be left out entirely.
_OMIT: Any = object()

_fakers = threading.local()


def _faker_for(locale: str, seed: int) -> Faker:
    """Return this thread's Faker for *locale*, reseeded with *seed*."""
    cache: dict[str, Faker] | None = getattr(_fakers, "cache", None)
    if cache is None:
        cache = _fakers.cache = {}
    resolved = _LOCALE_ALIASES.get(locale, locale)
    fake = cache.get(resolved)
    if fake is None:
        fake = cache[resolved] = Faker(resolved)
    fake.seed_instance(seed)
    return fake


def array_element_type(field_type: str) -> str | None:
    """Return ``T`` for ``List<T>``, ``Set<T>`` or ``T[]``; otherwise None."""
    match = _ARRAY_GENERIC.match(field_type) or _ARRAY_SUFFIX.match(field_type)
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Value producers
# ---------------------------------------------------------------------------


class _Session:
    """State for one ``generate`` call: a seeded Faker and the model directory."""

    def __init__(
        self,
        fake: Faker,
        options: GeneratorOptions,
        models: Mapping[str, ApiModel],
    ) -> None:
        self.fake = fake
        self.options = options
        self.models = models
        reference = options.reference_date
        if reference is None:
            # Midnight keeps unseeded-time output stable within a day.
            reference = datetime.now(tz=UTC).replace(
                hour=0, minute=0, second=0, microsecond=0
            )
        self.reference = reference

    def timestamp(self) -> str:
        """A recent ISO-8601 UTC timestamp (within the day before the reference)."""
        moment = self.fake.date_time_between(
            start_date=self.reference - timedelta(days=1),
            end_date=self.reference,
            tzinfo=UTC,
        )
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def money(self, low: float, high: float) -> float:
        return round(self.fake.random.uniform(low, high), 2)

    def object_from(self, fields: Iterable[ApiField], depth: int) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field in fields:
            value = self.field_value(field, depth)
            if value is not _OMIT:
                data[field.name] = value
        return data

    def field_value(self, field: ApiField, depth: int) -> Any:
        if not self.options.include_optional and not field.is_required:
            return _OMIT

        element_type = array_element_type(field.type)
        if element_type is not None:
            element = field.model_copy(
                update={"type": element_type, "is_required": True}
            )
            # Arrays do not count toward max_depth.
            return [
                self.field_value(element, depth)
                for _ in range(self.options.array_length)
            ]

        if field.is_complex:
            if depth >= self.options.max_depth:
                return None
            if field.ref_fields:
                return self.object_from(field.ref_fields, depth + 1)
            referenced = self.models.get(field.type)
            if referenced is not None:
                return self.object_from(referenced.fields, depth + 1)
            return {}

        return self.smart_value(field.name, field.type)

    def smart_value(self, field_name: str, field_type: str) -> Any:
        name = field_name.lower()
        kind = field_type.lower()
        for matches, produce in _NAME_RULES:
            if matches(name, kind):
                return produce(self)
        return self.type_value(kind)

    def type_value(self, kind: str) -> Any:
        fake = self.fake
        if kind in ("boolean", "bool"):
            return fake.pybool()
        if kind in ("int", "long", "integer", "number"):
            return fake.random_int(min=1, max=9999)
        if kind in ("double", "float", "decimal"):
            return self.money(0, 1000)
        if "date" in kind or "time" in kind or kind == "instant":
            return self.timestamp()
        if kind == "uuid":
            return fake.uuid4()
        return fake.word()


_Matcher = Callable[[str, str], bool]
_Producer = Callable[[_Session], Any]


def _equals(*names: str) -> _Matcher:
    return lambda name, _kind: name in names


def _contains(*parts: str) -> _Matcher:
    return lambda name, _kind: any(part in name for part in parts)


def _any_of(*matchers: _Matcher) -> _Matcher:
    return lambda name, kind: any(m(name, kind) for m in matchers)


def _is_identifier(name: str, kind: str) -> bool:
    return name == "id" and ("uuid" in kind or kind == "string")


def _is_timestamp_name(name: str, _kind: str) -> bool:
    return "date" in name or name.endswith("at")


# First match wins; order matters (``lat`` must be tested before ``*at``).
_NAME_RULES: tuple[tuple[_Matcher, _Producer], ...] = (
    (_contains("email"), lambda s: s.fake.email()),
    (_contains("phone", "tel"), lambda s: s.fake.phone_number()),
    (_equals("name", "fullname"), lambda s: s.fake.name()),
    (_contains("firstname"), lambda s: s.fake.first_name()),
    (_contains("lastname"), lambda s: s.fake.last_name()),
    (_contains("username"), lambda s: s.fake.user_name()),
    (_contains("password", "pwd"), lambda s: s.fake.password()),
    (_contains("url", "link", "website"), lambda s: s.fake.url()),
    (_contains("avatar", "profileimage"), lambda s: s.fake.image_url()),
    (_is_identifier, lambda s: s.fake.uuid4()),
    (
        _any_of(_contains("count", "quantity"), _equals("qty")),
        lambda s: s.fake.random_int(min=1, max=100),
    ),
    (_contains("price", "amount", "cost"), lambda s: s.money(10, 10000)),
    (_equals("age"), lambda s: s.fake.random_int(min=18, max=80)),
    (
        _any_of(_contains("description"), _equals("desc")),
        lambda s: s.fake.paragraph(),
    ),
    (_equals("title"), lambda s: s.fake.sentence()),
    (_equals("status"), lambda s: s.fake.random_element(_STATUSES)),
    (
        _equals("code"),
        lambda s: s.fake.lexify("??????", letters=_CODE_ALPHABET),
    ),
    (_contains("address"), lambda s: s.fake.street_address()),
    (_equals("city"), lambda s: s.fake.city()),
    (_equals("country"), lambda s: s.fake.country()),
    (
        _any_of(_contains("zipcode", "postalcode"), _equals("zip")),
        lambda s: s.fake.postcode(),
    ),
    (_equals("latitude", "lat"), lambda s: float(s.fake.latitude())),
    (_equals("longitude", "lng", "lon"), lambda s: float(s.fake.longitude())),
    (_equals("color"), lambda s: s.fake.hex_color()),
    (_any_of(_equals("ip"), _contains("ipaddress")), lambda s: s.fake.ipv4()),
    (_is_timestamp_name, lambda s: s.timestamp()),
    (_contains("company"), lambda s: s.fake.company()),
    (
        _equals("content", "body", "text"),
        lambda s: "\n".join(s.fake.paragraphs(nb=2)),
    ),
    (_equals("comment"), lambda s: s.fake.sentence()),
    (_equals("tag", "category"), lambda s: s.fake.word()),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _index_models(all_models: Iterable[ApiModel]) -> dict[str, ApiModel]:
    index: dict[str, ApiModel] = {}
    for model in all_models:
        index.setdefault(model.name, model)
    return index


class MockDataGenerator:
    """Generate plausible synthetic objects from :class:`ApiModel` schemas.

    Stateless apart from a per-thread Faker cache, so one instance may be
    shared by concurrent callers.
    """

    def __init__(self, defaults: GeneratorOptions | None = None) -> None:
        self._defaults = defaults

    def _options(self, options: GeneratorOptions | None) -> GeneratorOptions:
        if options is not None:
            return options
        if self._defaults is not None:
            return self._defaults.model_copy()
        return GeneratorOptions()

    def generate(
        self,
        model: ApiModel,
        all_models: Iterable[ApiModel] = (),
        options: GeneratorOptions | None = None,
    ) -> dict[str, Any]:
        """Return one synthetic object for *model*.

        Args:
            model: The schema to fill in.
            all_models: Directory used to resolve complex field types by name.
            options: Generation knobs; a fresh time-based seed when omitted.
        """
        opts = self._options(options)
        session = _Session(
            _faker_for(opts.locale, opts.seed), opts, _index_models(all_models)
        )
        return session.object_from(model.fields, 0)

    def generate_from_template(
        self,
        template: Mapping[str, Any],
        model: ApiModel,
        all_models: Iterable[ApiModel] = (),
        options: GeneratorOptions | None = None,
    ) -> dict[str, Any]:
        """Generate an object then overlay *template*; template keys always win."""
        data = self.generate(model, all_models, options)
        data.update(template)
        return data

    def generate_many(
        self,
        model: ApiModel,
        all_models: Iterable[ApiModel],
        count: int,
        options: GeneratorOptions | None = None,
    ) -> list[dict[str, Any]]:
        """Generate *count* objects seeded ``base_seed + index``."""
        base = self._options(options)
        models = list(all_models)
        return [
            self.generate(model, models, base.model_copy(update={"seed": base.seed + i}))
            for i in range(count)
        ]

    def smart_value(
        self,
        field_name: str,
        field_type: str,
        options: GeneratorOptions | None = None,
    ) -> Any:
        """Return a single primitive value for a field name and type."""
        opts = self._options(options)
        session = _Session(_faker_for(opts.locale, opts.seed), opts, {})
        return session.smart_value(field_name, field_type)


_default_generator = MockDataGenerator()


def generate_mock_data(
    model: ApiModel,
    all_models: Iterable[ApiModel] = (),
    options: GeneratorOptions | None = None,
) -> dict[str, Any]:
    return _default_generator.generate(model, all_models, options)


def generate_mock_data_from_template(
    template: Mapping[str, Any],
    model: ApiModel,
    all_models: Iterable[ApiModel] = (),
    options: GeneratorOptions | None = None,
) -> dict[str, Any]:
    return _default_generator.generate_from_template(
        template, model, all_models, options
    )


def generate_multiple_mock_data(
    model: ApiModel,
    all_models: Iterable[ApiModel],
    count: int,
    options: GeneratorOptions | None = None,
) -> list[dict[str, Any]]:
    return _default_generator.generate_many(model, all_models, count, options)


__all__ = [
    "MockDataGenerator",
    "array_element_type",
    "generate_mock_data",
    "generate_mock_data_from_template",
    "generate_multiple_mock_data",
]
