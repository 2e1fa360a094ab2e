"""Manage configuration.

Options given as keyword arguments to
:class:`~distdata.dist.Distribution` take precedence over the
``[distdata]`` section of an optional configuration file, which in turn
takes precedence over the built-in defaults.  The configuration file
is named by the ``config_file`` option or by the environment variable
``DISTDATA_CFG``.
"""

from collections import ChainMap
import configparser
import os
from distdata.exception import ConfigurationError


def get_config_file(options):
    try:
        return options['config_file']
    except KeyError:
        return os.environ.get('DISTDATA_CFG')

class Config(ChainMap):

    defaults = {
        'tmpdir': None,
        'tmp_prefix': "distdata-",
        'encoding': "utf-8",
    }
    config_section = "distdata"

    def __init__(self, options=None):
        options = { k:v for k, v in (options or {}).items() if v is not None }
        super().__init__({}, options)
        self.config_file = None
        config_file = get_config_file(options)
        if config_file:
            cp = configparser.ConfigParser(comment_prefixes=('#', '!'),
                                           interpolation=None)
            self.config_file = cp.read(config_file)
            if not self.config_file:
                raise ConfigurationError("configuration file %s not found"
                                         % config_file)
            try:
                self.maps.append(cp[self.config_section])
            except KeyError:
                pass
        self.maps.append(self.defaults)

    def get(self, key, required=False, type=None):
        value = super().get(key)
        if value is None:
            if required:
                raise ConfigurationError("%s not specified" % key)
        elif type:
            value = type(value)
        return value

    @property
    def tmpdir(self):
        return self.get('tmpdir')

    @property
    def tmp_prefix(self):
        return self.get('tmp_prefix', required=True)

    @property
    def encoding(self):
        return self.get('encoding', required=True)
