"""Control an LG webOS TV and decode Zigbee soil sensor reports."""

__version__ = "0.1.0"
