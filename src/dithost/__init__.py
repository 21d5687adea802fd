"""dithost: provider-agnostic application hosting.

An application record names a provider (where to run) and an instance
config (what to run), each with its own schema-validated JSON config. The
lifecycle controller starts and stops applications against whichever
provider is registered under that id.

Architecture:

    .. code-block:: text

        dithost
        ├── core/              ← errors, logging, settings, Registry base
        ├── models/            ← records, InstanceInfo, CloudConfig, ComposeConfig
        ├── mapping/           ← SchemaValidator, ConfigMapper, chaining
        ├── instance_configs/  ← compose / cloud-init → InstanceConfig
        ├── providers/         ← BaseProvider, ConfigurableProvider, AWS, stub
        ├── store/             ← AppStore protocol, in-memory, SQLite
        ├── controllers/       ← AppController, SerializedAppController
        ├── bootstrap.py       ← settings → registries → controller
        └── cli/               ← ``dithost`` Typer app
"""

__version__ = "0.1.0"
