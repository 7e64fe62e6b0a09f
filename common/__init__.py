"""
Shared helpers for the traffic-cams client.

- geo: great-circle distance and box midpoint
- types: bounding box, map-pin contract, API status envelopes
- bindable: property/collection change notification for UI binding
- logging_setup: JSON logging
"""
