"""Core OpenSIPS statistics.

doc: http://www.opensips.org/Documentation/Interface-CoreStatistics-1-11#toc1
src: https://github.com/OpenSIPS/opensips/blob/1.11/core_stats.h
"""

from opensips_exporter.processors.catalog import Catalog
from opensips_exporter.processors.metric import DEFAULT_NAMESPACE

SUBSYSTEM = "core"

REQUESTS_HELP = "Number of requests by OpenSIPS."
REPLIES_HELP = "Number of received replies by OpenSIPS."

# Statistic prefix -> value of the "kind" label
KINDS = {
    "fwd": "forwarded",
    "drop": "dropped",
    "err": "error",
}


def build_core_catalog(namespace: str = DEFAULT_NAMESPACE) -> Catalog:
    """Build the catalog of core statistics."""
    catalog = Catalog(SUBSYSTEM, namespace)

    catalog.counter(
        "rcv_requests", "received_requests_total", "Total number of received requests by OpenSIPS."
    )
    catalog.counter(
        "rcv_replies", "received_replies_total", "Total number of received replies by OpenSIPS."
    )

    for prefix, kind in KINDS.items():
        catalog.counter(f"{prefix}_requests", "requests", REQUESTS_HELP, labels={"kind": kind})
        catalog.counter(f"{prefix}_replies", "replies", REPLIES_HELP, labels={"kind": kind})

    catalog.counter(
        "bad_URIs_rcvd", "bad_URIs_rcvd", "Number of URIs that OpenSIPS failed to parse."
    )
    catalog.counter(
        "unsupported_methods",
        "unsupported_methods",
        "Number of non-standard methods encountered by OpenSIPS while parsing SIP methods.",
    )
    catalog.counter(
        "bad_msg_hdr", "bad_msg_hdr", "Number of SIP headers that OpenSIPS failed to parse."
    )
    catalog.counter(
        "timestamp", "uptime_seconds", "Number of seconds elapsed from OpenSIPS starting."
    )
    return catalog
