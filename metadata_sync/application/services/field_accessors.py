"""
Registro de accessors para ManualFields.

Un ManualField declara un property path con puntos ("certificateDetails.sha1Hash")
sobre el detalle de certificado de Sectigo. En vez de resolverlo por
introspeccion en cada certificado, el path se compila una sola vez en una
funcion getter a partir del esquema del modelo pydantic.

Cada segmento se resuelve sin distinguir mayusculas, por nombre de atributo
o por su alias de wire (camelCase).
"""
from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel

Getter = Callable[[Any], Any]


class FieldPathError(ValueError):
    """El property path no existe en el esquema del modelo."""


@dataclass(frozen=True)
class _Segment:
    attribute: str
    model: Optional[Type[BaseModel]]  # modelo anidado, si el atributo es otro modelo


def _nested_model(annotation: Any) -> Optional[Type[BaseModel]]:
    """Devuelve el modelo pydantic detras de una anotacion (Optional[Model] incluido)."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in typing.get_args(annotation):
        if isinstance(arg, type) and issubclass(arg, BaseModel):
            return arg
    return None


def _segments_for(model: Type[BaseModel]) -> Dict[str, _Segment]:
    segments: Dict[str, _Segment] = {}
    for name, info in model.model_fields.items():
        segment = _Segment(attribute=name, model=_nested_model(info.annotation))
        segments.setdefault(name.lower(), segment)
        if info.alias:
            segments.setdefault(info.alias.lower(), segment)
    return segments


def _chain(attributes: Tuple[str, ...]) -> Getter:
    def getter(obj: Any) -> Any:
        current = obj
        for attribute in attributes:
            if current is None:
                return None
            current = getattr(current, attribute)
        return current

    return getter


class FieldAccessorRegistry:
    """
    Compila property paths contra un modelo raiz.

    Uso:
        registry = FieldAccessorRegistry(SectigoCertificateDetails)
        getter = registry.compile("certificateDetails.sha1Hash")
        getter(details)  # -> "ab12..." o None si un nivel intermedio es None
    """

    def __init__(self, root: Type[BaseModel]) -> None:
        self._root = root
        self._schemas: Dict[Type[BaseModel], Dict[str, _Segment]] = {}
        self._compiled: Dict[str, Getter] = {}

    def _schema(self, model: Type[BaseModel]) -> Dict[str, _Segment]:
        if model not in self._schemas:
            self._schemas[model] = _segments_for(model)
        return self._schemas[model]

    def compile(self, path: str) -> Getter:
        """
        Raises:
            FieldPathError: si el path esta vacio o algun segmento no existe
        """
        if not path or not path.strip():
            raise FieldPathError("El property path no puede estar vacio")

        cache_key = path.strip().lower()
        if cache_key in self._compiled:
            return self._compiled[cache_key]

        attributes = []
        model: Optional[Type[BaseModel]] = self._root
        for part in path.strip().split("."):
            if model is None:
                raise FieldPathError(f"'{path}': '{part}' no se puede resolver sobre un valor simple")
            segment = self._schema(model).get(part.strip().lower())
            if segment is None:
                raise FieldPathError(f"'{path}': '{part}' no existe en {model.__name__}")
            attributes.append(segment.attribute)
            model = segment.model

        getter = _chain(tuple(attributes))
        self._compiled[cache_key] = getter
        return getter

    def resolve(self, obj: Any, path: str) -> Any:
        return self.compile(path)(obj)
