"""
Configuration system for quantum neurons
Every field is populated and validated once, at construction.
Supports JSON / YAML persistence and named presets
"""
import json
import numbers
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigurationError
from .quantum.encoding import EncodingMethod
from .quantum.gates import Entanglement

# Saved configurations default to ./configs (created on first save)
CONFIG_DIR = Path.cwd() / "configs"

YAML_SUFFIXES = ('.yaml', '.yml')


def _coerce_enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(
            f"Unknown {field_name} {value!r} (expected one of: {allowed})") from None


@dataclass(frozen=True)
class NeuronConfig:
    """Fully-populated configuration for one quantum neuron"""
    input_size: int

    # Circuit shape
    num_qubits: Optional[int] = None  # None -> input_size + 1
    encoding_method: EncodingMethod = EncodingMethod.ANGLE
    depth: int = 2
    entanglement: Entanglement = Entanglement.LINEAR

    # Quantum memory
    memory_qubits: int = 0
    memory_persistence: float = 0.5  # weight of the old state when blending
    decoherence_rate: float = 0.01   # fraction of phase lost per update

    # Bookkeeping
    name: str = "default"
    description: str = ""

    def __post_init__(self):
        set_ = object.__setattr__

        if self.num_qubits is None:
            set_(self, 'num_qubits', self.input_size + 1)
        set_(self, 'encoding_method',
             _coerce_enum(EncodingMethod, self.encoding_method, 'encoding method'))
        set_(self, 'entanglement',
             _coerce_enum(Entanglement, self.entanglement, 'entanglement'))
        for name in ('input_size', 'num_qubits', 'depth', 'memory_qubits'):
            value = getattr(self, name)
            if isinstance(value, numbers.Integral) and not isinstance(value, bool):
                set_(self, name, int(value))
        set_(self, 'memory_persistence', float(self.memory_persistence))
        set_(self, 'decoherence_rate', float(self.decoherence_rate))

        self.validate()

    def validate(self):
        """Reject invalid combinations immediately"""
        for name in ('input_size', 'num_qubits', 'depth', 'memory_qubits'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")

        if self.input_size < 1:
            raise ConfigurationError(f"input_size must be at least 1, got {self.input_size}")
        if self.num_qubits < self.input_size:
            raise ConfigurationError(
                f"Number of qubits ({self.num_qubits}) must be at least "
                f"equal to input size ({self.input_size})")
        if self.depth < 1:
            raise ConfigurationError(f"depth must be at least 1, got {self.depth}")
        if self.memory_qubits < 0:
            raise ConfigurationError(f"memory_qubits cannot be negative, got {self.memory_qubits}")
        if not 0.0 <= self.memory_persistence <= 1.0:
            raise ConfigurationError(
                f"memory_persistence must lie in [0, 1], got {self.memory_persistence}")
        if not 0.0 <= self.decoherence_rate <= 1.0:
            raise ConfigurationError(
                f"decoherence_rate must lie in [0, 1], got {self.decoherence_rate}")

    @property
    def total_qubits(self) -> int:
        """Computational plus memory qubits"""
        return self.num_qubits + self.memory_qubits

    @property
    def has_memory(self) -> bool:
        return self.memory_qubits > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (enums as strings)"""
        data = asdict(self)
        data['encoding_method'] = self.encoding_method.value
        data['entanglement'] = self.entanglement.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'NeuronConfig':
        """Build from a mapping, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        if 'input_size' not in data:
            raise ConfigurationError("Configuration requires input_size")
        return cls(**dict(data))

    def save(self, filename: Optional[Union[str, Path]] = None) -> Path:
        """Save configuration to JSON, or YAML for .yaml/.yml paths"""
        if filename is None:
            filename = CONFIG_DIR / f"{self.name}.json"
        filename = Path(filename)
        filename.parent.mkdir(parents=True, exist_ok=True)

        with open(filename, 'w') as f:
            if filename.suffix in YAML_SUFFIXES:
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)
        return filename

    @classmethod
    def load(cls, filename: Union[str, Path]) -> 'NeuronConfig':
        """Load configuration from file"""
        filename = Path(filename)
        with open(filename, 'r') as f:
            if filename.suffix in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        if not isinstance(data, dict):
            raise ConfigurationError(f"{filename} does not contain a configuration mapping")
        return cls.from_dict(data)

    def copy(self, **kwargs) -> 'NeuronConfig':
        """
        Create a validated copy with modified parameters.

        A num_qubits left at its default (input_size + 1) follows a new
        input_size unless num_qubits is overridden too.
        """
        if ('input_size' in kwargs and 'num_qubits' not in kwargs
                and self.num_qubits == self.input_size + 1):
            kwargs['num_qubits'] = None
        return replace(self, **kwargs)


class ConfigurationManager:
    """Named registry of neuron configurations"""

    def __init__(self):
        self.configs: Dict[str, NeuronConfig] = {}
        self.active_config: Optional[NeuronConfig] = None

    def create_config(self, name: str, base_config: Optional[str] = None, **kwargs) -> NeuronConfig:
        """Create a new configuration, optionally derived from a registered one"""
        if base_config is not None:
            if base_config not in self.configs:
                raise ConfigurationError(f"Configuration '{base_config}' not found")
            config = self.configs[base_config].copy(name=name, **kwargs)
        else:
            config = NeuronConfig(name=name, **kwargs)

        self.configs[name] = config
        return config

    def load_config(self, name: str, filename: Optional[Union[str, Path]] = None) -> NeuronConfig:
        """Load configuration from file and register it"""
        if filename is None:
            filename = CONFIG_DIR / f"{name}.json"

        config = NeuronConfig.load(filename)
        self.configs[name] = config
        return config

    def set_active(self, name: str):
        if name in self.configs:
            self.active_config = self.configs[name]
        else:
            raise ConfigurationError(f"Configuration '{name}' not found")

    def get_active(self) -> NeuronConfig:
        if self.active_config is None:
            self.active_config = create_standard_configs()['xor']
        return self.active_config


# Predefined configurations
def create_standard_configs() -> Dict[str, NeuronConfig]:
    """Standard neuron configurations"""
    configs = {}

    # Two-input classifier used by the XOR demo
    configs['xor'] = NeuronConfig(
        name='xor',
        description='2-qubit, depth-1, linear, memory-free XOR neuron',
        input_size=2,
        num_qubits=2,
        depth=1,
        entanglement='linear',
    )

    # Maze solver: (x, y, dx_goal, dy_goal) inputs
    configs['maze_explorer'] = NeuronConfig(
        name='maze_explorer',
        description='Wide all-to-all neuron with shared-style memory',
        input_size=4,
        num_qubits=8,
        depth=4,
        entanglement='all',
        memory_qubits=2,
        memory_persistence=0.7,
        decoherence_rate=0.005,
    )

    configs['maze_integrator'] = NeuronConfig(
        name='maze_integrator',
        description='Mid-size neuron with a single memory qubit',
        input_size=4,
        num_qubits=6,
        depth=3,
        entanglement='linear',
        memory_qubits=1,
        memory_persistence=0.6,
        decoherence_rate=0.01,
    )

    configs['maze_readout'] = NeuronConfig(
        name='maze_readout',
        description='Small memory-free output neuron',
        input_size=4,
        num_qubits=4,
        depth=2,
        entanglement='linear',
    )

    return configs


# Global configuration manager
config_manager = ConfigurationManager()

for _name, _config in create_standard_configs().items():
    config_manager.configs[_name] = _config

config_manager.set_active('xor')


def get_config(name: Optional[str] = None) -> NeuronConfig:
    """Get configuration by name, or the active configuration"""
    if name:
        if name not in config_manager.configs:
            raise ConfigurationError(f"Configuration '{name}' not found")
        return config_manager.configs[name]
    return config_manager.get_active()


__all__ = [
    'NeuronConfig',
    'ConfigurationManager',
    'create_standard_configs',
    'config_manager',
    'get_config',
    'CONFIG_DIR',
]
