# osclient.neutron - Neutron v2.0 networks

from osclient.neutron.api import ListNetworkOptions, NetworkApi, NeutronApi
from osclient.neutron.models import Network

__all__ = [
    "ListNetworkOptions",
    "Network",
    "NetworkApi",
    "NeutronApi",
]
