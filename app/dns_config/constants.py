"""Constants for DNS configuration module.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

DEFAULT_TTL = 3600
DEFAULT_REFRESH = 3600
DEFAULT_RETRY = 1800
DEFAULT_EXPIRE = 604800
DEFAULT_MINIMUM_TTL = 86400

SERIAL_SUFFIX = "01"
BACKUP_SUFFIX = ".bak"
COMPANION_SUFFIX = ".json"
PERMISSION_TEST_PREFIX = ".permission_test_"

SANDBOX_ZONES_SUBDIR = "zones"
SANDBOX_CONFIG_SUBDIR = "config"
SANDBOX_OPTIONS_NAME = "named.conf"
SANDBOX_ZONE_INCLUDE_NAME = "named.conf.zones"

RELOAD_FAILED_NOTE = "configuration persisted, reload failed"

DEFAULT_CONFIGURATION: dict = {
    "dnsServerStatus": False,
    "listenOn": ["127.0.0.1"],
    "allowQuery": ["localhost", "127.0.0.1"],
    "allowRecursion": ["localhost"],
    "forwarders": ["8.8.8.8", "8.8.4.4"],
    "allowTransfer": [],
    "dnssecValidation": False,
    "queryLogging": False,
    "zones": [
        {
            "zoneName": "example.com",
            "zoneType": "master",
            "fileName": "example.com.zone",
            "allowUpdate": ["none"],
            "records": [
                {"type": "A", "name": "@", "value": "192.168.1.100"},
                {"type": "CNAME", "name": "www", "value": "@"},
            ],
        },
    ],
}
