#!/usr/bin/env python3

from __future__ import annotations

import logging
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

EMITTER_FIELDS = ("name", "iban", "bic")


@dataclass
class Emitter:
    """Debtor identity stamped on the group header and payment block."""

    name: str
    iban: str
    bic: str

    @classmethod
    def from_yaml(cls, fname) -> Emitter:
        """Load the emitter from a YAML file.

        The fields may sit under a top-level ``emitter`` key or at the top
        level directly::

            emitter:
              name: Franz Holzapfel GMBH
              iban: AT611904300234573201
              bic: BKAUATWW
        """
        with open(fname) as f:
            settings = yaml.safe_load(f)

        if not isinstance(settings, dict):
            raise TypeError(f"{settings=} was not of type `dict`")
        if "emitter" in settings:
            settings = settings["emitter"]
            if not isinstance(settings, dict):
                raise TypeError(f"emitter {settings=} was not of type `dict`")

        for field_name in EMITTER_FIELDS:
            if field_name not in settings:
                raise ValueError(
                    f"Missing emitter field {field_name} in {fname}, "
                    f"expected all of {EMITTER_FIELDS}"
                )
            value = settings[field_name]
            if not isinstance(value, str):
                raise TypeError(f"{field_name}={value!r} was not of type `str`")

        emitter = cls(
            **{field_name: settings[field_name] for field_name in EMITTER_FIELDS}
        )
        logger.debug(f"Loaded {emitter=} from {fname}")
        return emitter
