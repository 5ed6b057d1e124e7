"""Device base class.

All instruments in dsoplot inherit from this class. It provides:
1. Configuration validation
2. Connection handling
3. Attribute access for metadata
"""

from __future__ import annotations

from typing import Type

from loguru import logger

from dsoplot.types.errors import ConfigurationError


class Device:
    """Base class for all instruments.

    Required Methods
    --------------
    All device implementations must override these methods:

    - open(): Check that the instrument answers
    - close(): Release anything held open
    - is_connected(): Check connection status

    Attributes
    ----------
    required_config : dict[str, Type]
        Required configuration parameters and their types

    Examples
    --------
    ```python
    class MyScope(Device):
        required_config = {"host": str}

        def open(self) -> tuple[bool, str]:
            return True, "Connected successfully"
    ```
    """

    required_config: dict[str, Type] = {}  # Required configuration keys

    def __init__(self, **config_kwargs):
        for key, value in config_kwargs.items():
            setattr(self, key, value)
        for key, value in self.required_config.items():
            if not hasattr(self, key):
                logger.error(
                    f"Device {self.__class__.__name__} missing required config key: "
                    + f"{key}"
                )
                raise ConfigurationError(
                    f"Device {self.__class__.__name__} missing required config "
                    + f"key: {key}"
                )
            if not isinstance(getattr(self, key), value):
                logger.error(
                    f"Device {self.__class__.__name__} config key {key} "
                    + f"has wrong type: {type(getattr(self, key))} (expected {value})"
                )
                raise ConfigurationError(
                    f"Device {self.__class__.__name__} config key {key} has "
                    + f"wrong type: {type(getattr(self, key))} (expected {value})"
                )

    def open(self) -> tuple[bool, str]:
        raise NotImplementedError()

    def close(self):
        raise NotImplementedError()

    def is_connected(self) -> bool:
        raise NotImplementedError()

    def get_all_attrs(self):
        """
        Function to return all of the managed attributes of the class
        Managed attributes are the ones that start with a underscore
        """
        attrs = {}
        for key, value in self.__dict__.items():
            # single underscore attr are managed
            if key[0] == "_" and not key.startswith(f"_{self.__class__.__name__}"):
                attrs[key[1:]] = value
        return attrs

    def unroll_metadata(self):
        # get all attributes in object and return as dict
        return self.get_all_attrs()
