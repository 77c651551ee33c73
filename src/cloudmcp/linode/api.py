"""Protocols describing the provider client surface the core consumes.

:class:`CatalogueSource` is all the reference cache needs; :class:`LinodeAPI`
is everything tool handlers call.  :class:`~cloudmcp.linode.client.LinodeClient`
satisfies both, and tests substitute fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cloudmcp.linode.client import ListOptions
    from cloudmcp.linode.models import Kernel, LinodeType, Profile, Region

Record = dict[str, Any]


@runtime_checkable
class CatalogueSource(Protocol):
    """Fetches the three low-churn reference catalogues."""

    async def list_regions(self, opts: ListOptions | None = None) -> list[Region]: ...
    async def list_types(self, opts: ListOptions | None = None) -> list[LinodeType]: ...
    async def list_kernels(self, opts: ListOptions | None = None) -> list[Kernel]: ...


@runtime_checkable
class LinodeAPI(CatalogueSource, Protocol):
    """Provider operations invoked by tool handlers."""

    @property
    def base_url(self) -> str: ...

    async def aclose(self) -> None: ...
    async def get_profile(self) -> Profile: ...
    async def get_account(self) -> Record: ...
    async def list_invoices(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_invoice(self, invoice_id: int) -> Record: ...
    async def list_invoice_items(self, invoice_id: int) -> list[Record]: ...
    async def list_payments(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_account_transfer(self) -> Record: ...
    async def list_account_availability(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_instances(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_instance(self, instance_id: int) -> Record: ...
    async def create_instance(self, body: dict[str, Any]) -> Record: ...
    async def delete_instance(self, instance_id: int) -> None: ...
    async def instance_action(self, instance_id: int, action: str, config_id: int | None = None) -> None: ...
    async def list_volumes(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_volume(self, volume_id: int) -> Record: ...
    async def create_volume(self, body: dict[str, Any]) -> Record: ...
    async def update_volume(self, volume_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_volume(self, volume_id: int) -> None: ...
    async def attach_volume(self, volume_id: int, body: dict[str, Any]) -> Record: ...
    async def detach_volume(self, volume_id: int) -> None: ...
    async def list_ips(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_ip(self, address: str) -> Record: ...
    async def allocate_ip(self, body: dict[str, Any]) -> Record: ...
    async def update_ip(self, address: str, body: dict[str, Any]) -> Record: ...
    async def assign_ips(self, region: str, assignments: list[dict[str, Any]]) -> None: ...
    async def list_vlans(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_ipv6_pools(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_ipv6_ranges(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_images(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_image(self, image_id: str) -> Record: ...
    async def create_image(self, body: dict[str, Any]) -> Record: ...
    async def update_image(self, image_id: str, body: dict[str, Any]) -> Record: ...
    async def delete_image(self, image_id: str) -> None: ...
    async def replicate_image(self, image_id: str, regions: list[str]) -> Record: ...
    async def create_image_upload(self, body: dict[str, Any]) -> Record: ...
    async def list_firewalls(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_firewall(self, firewall_id: int) -> Record: ...
    async def create_firewall(self, body: dict[str, Any]) -> Record: ...
    async def update_firewall(self, firewall_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_firewall(self, firewall_id: int) -> None: ...
    async def update_firewall_rules(self, firewall_id: int, body: dict[str, Any]) -> Record: ...
    async def create_firewall_device(self, firewall_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_firewall_device(self, firewall_id: int, device_id: int) -> None: ...
    async def list_nodebalancers(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_nodebalancer(self, nodebalancer_id: int) -> Record: ...
    async def create_nodebalancer(self, body: dict[str, Any]) -> Record: ...
    async def update_nodebalancer(self, nodebalancer_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_nodebalancer(self, nodebalancer_id: int) -> None: ...
    async def create_nodebalancer_config(self, nodebalancer_id: int, body: dict[str, Any]) -> Record: ...
    async def update_nodebalancer_config(
        self, nodebalancer_id: int, config_id: int, body: dict[str, Any]
    ) -> Record: ...
    async def delete_nodebalancer_config(self, nodebalancer_id: int, config_id: int) -> None: ...
    async def list_domains(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_domain(self, domain_id: int) -> Record: ...
    async def create_domain(self, body: dict[str, Any]) -> Record: ...
    async def update_domain(self, domain_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_domain(self, domain_id: int) -> None: ...
    async def list_domain_records(self, domain_id: int, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_domain_record(self, domain_id: int, record_id: int) -> Record: ...
    async def create_domain_record(self, domain_id: int, body: dict[str, Any]) -> Record: ...
    async def update_domain_record(self, domain_id: int, record_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_domain_record(self, domain_id: int, record_id: int) -> None: ...
    async def list_stackscripts(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_stackscript(self, stackscript_id: int) -> Record: ...
    async def create_stackscript(self, body: dict[str, Any]) -> Record: ...
    async def update_stackscript(self, stackscript_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_stackscript(self, stackscript_id: int) -> None: ...
    async def list_lke_clusters(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_lke_cluster(self, cluster_id: int) -> Record: ...
    async def list_lke_node_pools(self, cluster_id: int) -> list[Record]: ...
    async def create_lke_cluster(self, body: dict[str, Any]) -> Record: ...
    async def update_lke_cluster(self, cluster_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_lke_cluster(self, cluster_id: int) -> None: ...
    async def get_lke_kubeconfig(self, cluster_id: int) -> Record: ...
    async def create_lke_node_pool(self, cluster_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_lke_node_pool(self, cluster_id: int, pool_id: int) -> None: ...
    async def update_lke_node_pool(self, cluster_id: int, pool_id: int, body: dict[str, Any]) -> Record: ...
    async def list_databases(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_engine_databases(self, engine: str, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_engine_database(self, engine: str, database_id: int) -> Record: ...
    async def get_engine_database_credentials(self, engine: str, database_id: int) -> Record: ...
    async def create_engine_database(self, engine: str, body: dict[str, Any]) -> Record: ...
    async def update_engine_database(self, engine: str, database_id: int, body: dict[str, Any]) -> Record: ...
    async def delete_engine_database(self, engine: str, database_id: int) -> None: ...
    async def reset_engine_database_credentials(self, engine: str, database_id: int) -> None: ...
    async def list_database_engines(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_database_types(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_object_storage_clusters(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def list_buckets(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_bucket(self, cluster: str, label: str) -> Record: ...
    async def create_bucket(self, body: dict[str, Any]) -> Record: ...
    async def delete_bucket(self, cluster: str, label: str) -> None: ...
    async def update_bucket_access(self, cluster: str, label: str, body: dict[str, Any]) -> None: ...
    async def list_objects(self, cluster: str, label: str, params: dict[str, Any] | None = None) -> Record: ...
    async def create_object_url(self, cluster: str, label: str, body: dict[str, Any]) -> Record: ...
    async def send_presigned(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> None: ...
    async def list_object_storage_keys(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_object_storage_key(self, key_id: int) -> Record: ...
    async def create_object_storage_key(self, body: dict[str, Any]) -> Record: ...
    async def delete_object_storage_key(self, key_id: int) -> None: ...
    async def update_object_storage_key(self, key_id: int, body: dict[str, Any]) -> Record: ...
    async def list_longview_clients(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_longview_client(self, client_id: int) -> Record: ...
    async def create_longview_client(self, body: dict[str, Any]) -> Record: ...
    async def delete_longview_client(self, client_id: int) -> None: ...
    async def update_longview_client(self, client_id: int, body: dict[str, Any]) -> Record: ...
    async def list_support_tickets(self, opts: ListOptions | None = None) -> list[Record]: ...
    async def get_support_ticket(self, ticket_id: int) -> Record: ...
    async def create_support_ticket(self, body: dict[str, Any]) -> Record: ...
    async def reply_support_ticket(self, ticket_id: int, description: str) -> Record: ...
