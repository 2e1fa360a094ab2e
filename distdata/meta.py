"""Provide the DistMeta class that represents the distribution metadata.

The metadata is read from a META.yml or META.json file following the
CPAN::Meta::Spec.  Metadata of meta-spec version 1.x is converted to
the layout of version 2 when loaded, so that users only need to deal
with one format.
"""

import copy
import json
import logging
from pathlib import Path
import yaml
from distdata.exception import MetadataError
from distdata.tools import Version

log = logging.getLogger(__name__)


class _MetaLoader(yaml.SafeLoader):
    """A YAML loader that does not resolve int and float scalars.

    Version numbers such as 1.10 must be kept as they are written.
    """
    pass

_MetaLoader.yaml_implicit_resolvers = {
    k: [ r for r in v if r[0] not in ('tag:yaml.org,2002:int',
                                      'tag:yaml.org,2002:float') ]
    for k, v in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


MetaSpecURL = "http://search.cpan.org/perldoc?CPAN::Meta::Spec"

license_map_1 = {
    'apache': 'apache_2_0',
    'apache_1_1': 'apache_1_1',
    'artistic': 'artistic_1',
    'artistic_2': 'artistic_2',
    'artistic2': 'artistic_2',
    'bsd': 'bsd',
    'gpl': 'open_source',
    'lgpl': 'open_source',
    'mit': 'mit',
    'mozilla': 'open_source',
    'open_source': 'open_source',
    'perl': 'perl_5',
    'restrictive': 'restricted',
    'restricted': 'restricted',
    'unrestricted': 'unrestricted',
    'unknown': 'unknown',
}
"""Map meta-spec 1.x license names to their version 2 equivalent."""

prereq_map_1 = {
    'requires': ('runtime', 'requires'),
    'recommends': ('runtime', 'recommends'),
    'conflicts': ('runtime', 'conflicts'),
    'build_requires': ('build', 'requires'),
    'configure_requires': ('configure', 'requires'),
    'test_requires': ('test', 'requires'),
}
"""Map meta-spec 1.x prerequisite keys to (phase, type) in version 2."""


def _as_bool(value, default):
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in ('', '0', 'false', 'no')
    return bool(value)

def _as_list(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [ str(v) for v in value ]
    return [ str(value) ]

def _prereq_versions(reqs):
    return { str(k): str(v) for k, v in (reqs or {}).items() }

def _release_status(version):
    if version and '_' in version:
        return 'testing'
    else:
        return 'stable'


def _convert_prereqs_1(data):
    """Collect the meta-spec 1.x prerequisite keys from data into a
    version 2 prereqs structure.
    """
    prereqs = {}
    for key, (phase, rtype) in prereq_map_1.items():
        if data.get(key):
            prereqs.setdefault(phase, {})[rtype] = _prereq_versions(data[key])
    return prereqs

def _convert_resources_1(resources):
    converted = {}
    for key, value in (resources or {}).items():
        if key == 'license':
            converted['license'] = _as_list(value)
        elif key == 'repository':
            converted['repository'] = { 'url': value }
        elif key == 'bugtracker':
            converted['bugtracker'] = { 'web': value }
        elif key == 'homepage':
            converted['homepage'] = value
        elif key.lower().startswith('x_'):
            converted['x_%s' % key[2:].lower()] = value
        elif key.lower() != key:
            # Custom resources were capitalized in meta-spec 1.x.
            converted['x_%s' % key.lower()] = value
        else:
            converted[key] = value
    return converted

def _convert_no_index_1(no_index):
    converted = {}
    for key, value in (no_index or {}).items():
        if key == 'dir':
            key = 'directory'
        converted.setdefault(key, []).extend(_as_list(value))
    return converted

def _convert_features_1(features):
    converted = {}
    for name, feature in (features or {}).items():
        feature = dict(feature or {})
        conv = {}
        if 'description' in feature:
            conv['description'] = feature['description']
        conv['prereqs'] = _convert_prereqs_1(feature)
        converted[name] = conv
    return converted


def convert_1(data):
    """Convert a meta-spec 1.x structure to the version 2 layout.
    """
    version = None if data.get('version') is None else str(data['version'])
    converted = {
        'name': data.get('name'),
        'version': version,
        'abstract': data.get('abstract', 'unknown'),
        'author': _as_list(data.get('author')),
        'license': [ license_map_1.get(str(l), 'unknown')
                     for l in _as_list(data.get('license', 'unknown')) ],
        'dynamic_config': _as_bool(data.get('dynamic_config'), True),
        'release_status': _release_status(version),
        'generated_by': data.get('generated_by'),
        'meta-spec': { 'version': "2", 'url': MetaSpecURL },
        'keywords': _as_list(data.get('keywords')),
        'prereqs': _convert_prereqs_1(data),
        'resources': _convert_resources_1(data.get('resources')),
        'no_index': _convert_no_index_1(data.get('no_index')
                                        or data.get('private')),
        'provides': copy.deepcopy(data.get('provides') or {}),
        'optional_features': _convert_features_1(data
                                                 .get('optional_features')),
    }
    if data.get('description') is not None:
        converted['description'] = data['description']
    for key, value in data.items():
        if key.startswith('x_') or key.startswith('X_'):
            converted[key.lower()] = copy.deepcopy(value)
    return converted


class DistMeta:
    """The metadata of a distribution.

    All fields are populated when the object is created from a data
    dictionary in meta-spec version 2 layout.  Use :meth:`load_file`
    or :meth:`from_data` to create it from input of any version.
    """

    def __init__(self, data):
        meta_spec = data.get('meta-spec') or {}
        self.meta_spec = {
            'version': str(meta_spec.get('version', "2")),
            'url': meta_spec.get('url', MetaSpecURL),
        }
        self.name = data.get('name')
        version = data.get('version')
        self.version = None if version is None else str(version)
        self.abstract = data.get('abstract')
        self.description = data.get('description')
        self.authors = _as_list(data.get('author'))
        self.licenses = _as_list(data.get('license'))
        self.keywords = _as_list(data.get('keywords'))
        self.generated_by = data.get('generated_by')
        self.resources = data.get('resources') or {}
        self.dynamic_config = _as_bool(data.get('dynamic_config'), True)
        self.release_status = (data.get('release_status')
                               or _release_status(self.version))
        self.prereqs = {
            phase: { rtype: _prereq_versions(reqs)
                     for rtype, reqs in (types or {}).items() }
            for phase, types in (data.get('prereqs') or {}).items()
        }
        self.optional_features = data.get('optional_features') or {}
        self.provides = data.get('provides') or {}
        self.no_index = data.get('no_index') or {}
        self.custom = { k: v for k, v in data.items() if k.startswith('x_') }

    @classmethod
    def from_data(cls, data):
        """Create the metadata from a dictionary of any meta-spec version.
        """
        if not isinstance(data, dict):
            raise MetadataError("metadata must be a mapping")
        try:
            spec_version = Version(str(data['meta-spec']['version']))
        except (KeyError, TypeError):
            spec_version = Version("1.0")
        except ValueError:
            raise MetadataError("invalid meta-spec version %r"
                                % data['meta-spec']['version'])
        if spec_version < "2":
            log.debug("converting metadata from meta-spec %s", spec_version)
            data = convert_1(data)
        return cls(data)

    @classmethod
    def load_file(cls, path):
        """Read the metadata from a META.json or META.yml file.
        """
        path = Path(path)
        log.debug("reading metadata from %s", path)
        with path.open("rt", encoding="utf-8") as f:
            try:
                if path.suffix == ".json":
                    data = json.load(f, parse_float=str)
                else:
                    data = yaml.load(f, Loader=_MetaLoader)
            except (ValueError, yaml.YAMLError) as e:
                raise MetadataError("%s: %s" % (path, e))
        try:
            return cls.from_data(data)
        except MetadataError as e:
            raise MetadataError("%s: %s" % (path, e))

    @property
    def spec_version(self):
        return Version(self.meta_spec['version'])

    def requirements_for(self, phase, type="requires"):
        """Return the {module: version} mapping for phase and type.
        """
        return dict(self.prereqs.get(phase, {}).get(type, {}))

    def as_dict(self):
        """Return a dictionary representation in meta-spec 2 layout.
        """
        d = {
            'meta-spec': dict(self.meta_spec),
            'name': self.name,
            'version': self.version,
            'abstract': self.abstract,
            'author': list(self.authors),
            'license': list(self.licenses),
            'dynamic_config': self.dynamic_config,
            'release_status': self.release_status,
            'generated_by': self.generated_by,
        }
        if self.description is not None:
            d['description'] = self.description
        for k in ('keywords', 'resources', 'prereqs', 'optional_features',
                  'provides', 'no_index'):
            v = getattr(self, k)
            if v:
                d[k] = copy.deepcopy(v)
        d.update(copy.deepcopy(self.custom))
        return d

    def __repr__(self):
        return "%s(%s %s)" % (self.__class__.__name__, self.name, self.version)
