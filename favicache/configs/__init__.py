"""Configuration for favicache"""

from dynaconf import Dynaconf, Validator

# Validators for favicache settings.
_validators = [
    Validator("logging.format", is_in=["mozlog", "pretty"]),
    Validator("logging.level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    Validator("logging.can_propagate", is_type_of=bool),
    Validator("metrics.dev_logger", is_type_of=bool),
    Validator("metrics.host", is_type_of=str),
    Validator("metrics.port", gte=0, is_type_of=int),
    Validator("icons.cache_dir", is_type_of=str, must_exist=True),
    # A TTL of 0 means the positive cache never expires.
    Validator("icons.cache_ttl_sec", is_type_of=int, gte=0, must_exist=True),
    Validator("icons.cache_negttl_sec", is_type_of=int, gte=0, must_exist=True),
    Validator("icons.blacklist_regex", is_type_of=str),
    Validator("icons.blacklist_non_global_ips", is_type_of=bool, must_exist=True),
    Validator("icons.disable_download", is_type_of=bool),
    Validator("icons.download_timeout_sec", is_type_of=(int, float), gt=0, must_exist=True),
    Validator("icons.single_flight", is_type_of=bool),
    Validator("icons.max_connections", is_type_of=int, gte=1),
    # Production must never fetch from internal networks.
    Validator(
        "icons.blacklist_non_global_ips",
        eq=True,
        env=["production"],
    ),
    Validator("web.icons.cache_max_age", is_type_of=int, gte=0),
    Validator("sentry.env", is_in=["prod", "stage", "dev"]),
    Validator("sentry.mode", is_in=["disabled", "release", "debug"]),
    Validator("sentry.traces_sample_rate", gte=0, lte=1),
]

# `root_path` = The root path for Dynaconf, DO NOT CHANGE.
# `envvar_prefix` = Export envvars with `export FAVICACHE_FOO=bar`.
# `settings_files` = Load these files in the order.
# `environments` = Enable layered environments such as `development`, `production`, `testing` etc.
# `env_switcher` = Switch environments with `export FAVICACHE_ENV=production`.
# `validators` = Define validators for favicache settings.

settings = Dynaconf(
    root_path="favicache",
    envvar_prefix="FAVICACHE",
    settings_files=[
        "configs/default.toml",
        "configs/development.toml",
        "configs/production.toml",
        "configs/testing.toml",
    ],
    environments=True,
    env_switcher="FAVICACHE_ENV",
    merge_enabled=True,
    validators=_validators,
)
