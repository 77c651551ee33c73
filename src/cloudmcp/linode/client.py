"""Async client for the Linode REST API (v4).

Wraps one ``httpx.AsyncClient`` built from an HTTP transport profile.  All
``list_*`` methods walk the provider's pagination envelope
(``{"data": [...], "page": n, "pages": m}``) unless a :class:`ListOptions`
pins a single page.

Usage::

    client = LinodeClient.create(token, base_url="https://api.linode.com/v4")
    profile = await client.get_profile()
    regions = await client.list_regions()
    await client.aclose()
"""

from __future__ import annotations

import json
import logging
from typing import Any, cast

import httpx
from pydantic import BaseModel

from cloudmcp.core.config import DEFAULT_API_URL
from cloudmcp.core.errors import UpstreamError
from cloudmcp.linode.models import Kernel, LinodeType, Profile, Region, parse_records
from cloudmcp.transport.auth import BearerAuth
from cloudmcp.transport.profiles import HTTPClientConfig, build_async_client

logger = logging.getLogger(__name__)

Record = dict[str, Any]

_MAX_PAGE_SIZE = 500


class ListOptions(BaseModel):
    """Pagination and filtering for ``list_*`` calls."""

    page: int | None = None
    page_size: int | None = None
    filter: dict[str, Any] | None = None


class LinodeClient:
    """Authenticated client bound to one account's token and base URL."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    @classmethod
    def create(
        cls,
        token: str,
        *,
        base_url: str = "",
        config: HTTPClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> LinodeClient:
        """Build a client with its own pooled transport and bearer credential."""
        http = build_async_client(
            config or HTTPClientConfig(),
            base_url=base_url or DEFAULT_API_URL,
            auth=BearerAuth(token),
            transport=transport,
        )
        return cls(http)

    def __repr__(self) -> str:
        return f"LinodeClient(base_url={self.base_url!r})"

    @property
    def base_url(self) -> str:
        return str(self._http.base_url).rstrip("/")

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    async def _send(self, method: str, url: str, *, operation: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise UpstreamError(0, f"request timed out ({type(exc).__name__})", operation=operation) from exc
        except httpx.TransportError as exc:
            raise UpstreamError(0, f"transport failure: {type(exc).__name__}", operation=operation) from exc

        logger.debug("%s %s -> %d", method, response.request.url.path, response.status_code)

        if response.is_error:
            raise UpstreamError(
                response.status_code,
                _error_message(response),
                operation=operation,
            )
        return response

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._send(
            method, path, operation=operation, json=body, params=params, headers=headers
        )
        if not response.content:
            return {}
        try:
            return response.json()
        except json.JSONDecodeError as exc:
            raise UpstreamError(
                response.status_code, "response body is not valid JSON", operation=operation
            ) from exc

    async def _get(self, path: str, operation: str) -> Record:
        return cast("Record", await self._request("GET", path, operation=operation))

    async def _post(self, path: str, operation: str, body: dict[str, Any] | None = None) -> Record:
        return cast("Record", await self._request("POST", path, operation=operation, body=body or {}))

    async def _put(self, path: str, operation: str, body: dict[str, Any]) -> Record:
        return cast("Record", await self._request("PUT", path, operation=operation, body=body))

    async def _delete(self, path: str, operation: str) -> None:
        await self._request("DELETE", path, operation=operation)

    async def _list(self, path: str, operation: str, opts: ListOptions | None = None) -> list[Record]:
        headers = None
        if opts is not None and opts.filter:
            headers = {"X-Filter": json.dumps(opts.filter, separators=(",", ":"))}
        page_size = (opts.page_size if opts else None) or _MAX_PAGE_SIZE
        page = (opts.page if opts else None) or 1
        single_page = opts is not None and opts.page is not None

        items: list[Record] = []
        while True:
            envelope = await self._request(
                "GET",
                path,
                operation=operation,
                params={"page": page, "page_size": page_size},
                headers=headers,
            )
            items.extend(envelope.get("data", []))
            pages = int(envelope.get("pages", 1) or 1)
            if single_page or page >= pages:
                return items
            page += 1

    # ------------------------------------------------------------------
    # Profile / account
    # ------------------------------------------------------------------

    async def get_profile(self) -> Profile:
        return Profile.model_validate(await self._get("/profile", "get profile"))

    async def get_account(self) -> Record:
        return await self._get("/account", "get account")

    async def list_invoices(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/account/invoices", "list invoices", opts)

    async def get_invoice(self, invoice_id: int) -> Record:
        return await self._get(f"/account/invoices/{invoice_id}", f"get invoice {invoice_id}")

    async def list_invoice_items(self, invoice_id: int) -> list[Record]:
        return await self._list(f"/account/invoices/{invoice_id}/items", f"list items of invoice {invoice_id}")

    async def list_payments(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/account/payments", "list payments", opts)

    async def get_account_transfer(self) -> Record:
        return await self._get("/account/transfer", "get network transfer")

    async def list_account_availability(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/account/availability", "list region availability", opts)

    # ------------------------------------------------------------------
    # Reference catalogues
    # ------------------------------------------------------------------

    async def list_regions(self, opts: ListOptions | None = None) -> list[Region]:
        return parse_records(Region, await self._list("/regions", "list regions", opts))

    async def list_types(self, opts: ListOptions | None = None) -> list[LinodeType]:
        return parse_records(LinodeType, await self._list("/linode/types", "list types", opts))

    async def list_kernels(self, opts: ListOptions | None = None) -> list[Kernel]:
        return parse_records(Kernel, await self._list("/linode/kernels", "list kernels", opts))

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    async def list_instances(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/linode/instances", "list instances", opts)

    async def get_instance(self, instance_id: int) -> Record:
        return await self._get(f"/linode/instances/{instance_id}", f"get instance {instance_id}")

    async def create_instance(self, body: dict[str, Any]) -> Record:
        return await self._post("/linode/instances", "create instance", body)

    async def delete_instance(self, instance_id: int) -> None:
        await self._delete(f"/linode/instances/{instance_id}", f"delete instance {instance_id}")

    async def instance_action(self, instance_id: int, action: str, config_id: int | None = None) -> None:
        """Run ``boot``, ``shutdown`` or ``reboot`` on an instance."""
        body = {"config_id": config_id} if config_id else {}
        await self._post(f"/linode/instances/{instance_id}/{action}", f"{action} instance {instance_id}", body)

    # ------------------------------------------------------------------
    # Volumes
    # ------------------------------------------------------------------

    async def list_volumes(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/volumes", "list volumes", opts)

    async def get_volume(self, volume_id: int) -> Record:
        return await self._get(f"/volumes/{volume_id}", f"get volume {volume_id}")

    async def create_volume(self, body: dict[str, Any]) -> Record:
        return await self._post("/volumes", "create volume", body)

    async def update_volume(self, volume_id: int, body: dict[str, Any]) -> Record:
        return await self._put(f"/volumes/{volume_id}", f"update volume {volume_id}", body)

    async def delete_volume(self, volume_id: int) -> None:
        await self._delete(f"/volumes/{volume_id}", f"delete volume {volume_id}")

    async def attach_volume(self, volume_id: int, body: dict[str, Any]) -> Record:
        return await self._post(f"/volumes/{volume_id}/attach", f"attach volume {volume_id}", body)

    async def detach_volume(self, volume_id: int) -> None:
        await self._post(f"/volumes/{volume_id}/detach", f"detach volume {volume_id}")

    # ------------------------------------------------------------------
    # Networking
    # ------------------------------------------------------------------

    async def list_ips(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/networking/ips", "list IP addresses", opts)

    async def get_ip(self, address: str) -> Record:
        return await self._get(f"/networking/ips/{address}", f"get IP address {address}")

    async def allocate_ip(self, body: dict[str, Any]) -> Record:
        return await self._post("/networking/ips", "allocate IP address", body)

    async def update_ip(self, address: str, body: dict[str, Any]) -> Record:
        return await self._put(f"/networking/ips/{address}", f"update IP address {address}", body)

    async def assign_ips(self, region: str, assignments: list[dict[str, Any]]) -> None:
        await self._post(
            "/networking/ips/assign",
            "assign IP addresses",
            {"region": region, "assignments": assignments},
        )

    async def list_vlans(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/networking/vlans", "list VLANs", opts)

    async def list_ipv6_pools(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/networking/ipv6/pools", "list IPv6 pools", opts)

    async def list_ipv6_ranges(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/networking/ipv6/ranges", "list IPv6 ranges", opts)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def list_images(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/images", "list images", opts)

    async def get_image(self, image_id: str) -> Record:
        return await self._get(f"/images/{image_id}", f"get image {image_id}")

    async def create_image(self, body: dict[str, Any]) -> Record:
        return await self._post("/images", "create image", body)

    async def update_image(self, image_id: str, body: dict[str, Any]) -> Record:
        return await self._put(f"/images/{image_id}", f"update image {image_id}", body)

    async def delete_image(self, image_id: str) -> None:
        await self._delete(f"/images/{image_id}", f"delete image {image_id}")

    async def replicate_image(self, image_id: str, regions: list[str]) -> Record:
        return await self._post(
            f"/images/{image_id}/regions", f"replicate image {image_id}", {"regions": regions}
        )

    async def create_image_upload(self, body: dict[str, Any]) -> Record:
        return await self._post("/images/upload", "create image upload", body)

    # ------------------------------------------------------------------
    # Firewalls
    # ------------------------------------------------------------------

    async def list_firewalls(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/networking/firewalls", "list firewalls", opts)

    async def get_firewall(self, firewall_id: int) -> Record:
        return await self._get(f"/networking/firewalls/{firewall_id}", f"get firewall {firewall_id}")

    async def create_firewall(self, body: dict[str, Any]) -> Record:
        return await self._post("/networking/firewalls", "create firewall", body)

    async def update_firewall(self, firewall_id: int, body: dict[str, Any]) -> Record:
        return await self._put(f"/networking/firewalls/{firewall_id}", f"update firewall {firewall_id}", body)

    async def delete_firewall(self, firewall_id: int) -> None:
        await self._delete(f"/networking/firewalls/{firewall_id}", f"delete firewall {firewall_id}")

    async def update_firewall_rules(self, firewall_id: int, body: dict[str, Any]) -> Record:
        return await self._put(
            f"/networking/firewalls/{firewall_id}/rules", f"update firewall {firewall_id} rules", body
        )

    async def create_firewall_device(self, firewall_id: int, body: dict[str, Any]) -> Record:
        return await self._post(
            f"/networking/firewalls/{firewall_id}/devices", f"add device to firewall {firewall_id}", body
        )

    async def delete_firewall_device(self, firewall_id: int, device_id: int) -> None:
        await self._delete(
            f"/networking/firewalls/{firewall_id}/devices/{device_id}",
            f"remove device {device_id} from firewall {firewall_id}",
        )

    # ------------------------------------------------------------------
    # NodeBalancers
    # ------------------------------------------------------------------

    async def list_nodebalancers(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/nodebalancers", "list nodebalancers", opts)

    async def get_nodebalancer(self, nodebalancer_id: int) -> Record:
        return await self._get(f"/nodebalancers/{nodebalancer_id}", f"get nodebalancer {nodebalancer_id}")

    async def create_nodebalancer(self, body: dict[str, Any]) -> Record:
        return await self._post("/nodebalancers", "create nodebalancer", body)

    async def update_nodebalancer(self, nodebalancer_id: int, body: dict[str, Any]) -> Record:
        return await self._put(
            f"/nodebalancers/{nodebalancer_id}", f"update nodebalancer {nodebalancer_id}", body
        )

    async def delete_nodebalancer(self, nodebalancer_id: int) -> None:
        await self._delete(f"/nodebalancers/{nodebalancer_id}", f"delete nodebalancer {nodebalancer_id}")

    async def create_nodebalancer_config(self, nodebalancer_id: int, body: dict[str, Any]) -> Record:
        return await self._post(
            f"/nodebalancers/{nodebalancer_id}/configs",
            f"create config on nodebalancer {nodebalancer_id}",
            body,
        )

    async def update_nodebalancer_config(
        self, nodebalancer_id: int, config_id: int, body: dict[str, Any]
    ) -> Record:
        return await self._put(
            f"/nodebalancers/{nodebalancer_id}/configs/{config_id}",
            f"update config {config_id} of nodebalancer {nodebalancer_id}",
            body,
        )

    async def delete_nodebalancer_config(self, nodebalancer_id: int, config_id: int) -> None:
        await self._delete(
            f"/nodebalancers/{nodebalancer_id}/configs/{config_id}",
            f"delete config {config_id} of nodebalancer {nodebalancer_id}",
        )

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    async def list_domains(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/domains", "list domains", opts)

    async def get_domain(self, domain_id: int) -> Record:
        return await self._get(f"/domains/{domain_id}", f"get domain {domain_id}")

    async def create_domain(self, body: dict[str, Any]) -> Record:
        return await self._post("/domains", "create domain", body)

    async def update_domain(self, domain_id: int, body: dict[str, Any]) -> Record:
        return await self._put(f"/domains/{domain_id}", f"update domain {domain_id}", body)

    async def delete_domain(self, domain_id: int) -> None:
        await self._delete(f"/domains/{domain_id}", f"delete domain {domain_id}")

    async def list_domain_records(self, domain_id: int, opts: ListOptions | None = None) -> list[Record]:
        return await self._list(f"/domains/{domain_id}/records", f"list records of domain {domain_id}", opts)

    async def get_domain_record(self, domain_id: int, record_id: int) -> Record:
        return await self._get(f"/domains/{domain_id}/records/{record_id}", f"get domain record {record_id}")

    async def create_domain_record(self, domain_id: int, body: dict[str, Any]) -> Record:
        return await self._post(f"/domains/{domain_id}/records", f"create record in domain {domain_id}", body)

    async def update_domain_record(self, domain_id: int, record_id: int, body: dict[str, Any]) -> Record:
        return await self._put(
            f"/domains/{domain_id}/records/{record_id}", f"update domain record {record_id}", body
        )

    async def delete_domain_record(self, domain_id: int, record_id: int) -> None:
        await self._delete(f"/domains/{domain_id}/records/{record_id}", f"delete domain record {record_id}")

    # ------------------------------------------------------------------
    # StackScripts
    # ------------------------------------------------------------------

    async def list_stackscripts(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/linode/stackscripts", "list stackscripts", opts)

    async def get_stackscript(self, stackscript_id: int) -> Record:
        return await self._get(f"/linode/stackscripts/{stackscript_id}", f"get stackscript {stackscript_id}")

    async def create_stackscript(self, body: dict[str, Any]) -> Record:
        return await self._post("/linode/stackscripts", "create stackscript", body)

    async def update_stackscript(self, stackscript_id: int, body: dict[str, Any]) -> Record:
        return await self._put(
            f"/linode/stackscripts/{stackscript_id}", f"update stackscript {stackscript_id}", body
        )

    async def delete_stackscript(self, stackscript_id: int) -> None:
        await self._delete(f"/linode/stackscripts/{stackscript_id}", f"delete stackscript {stackscript_id}")

    # ------------------------------------------------------------------
    # LKE
    # ------------------------------------------------------------------

    async def list_lke_clusters(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/lke/clusters", "list LKE clusters", opts)

    async def get_lke_cluster(self, cluster_id: int) -> Record:
        return await self._get(f"/lke/clusters/{cluster_id}", f"get LKE cluster {cluster_id}")

    async def list_lke_node_pools(self, cluster_id: int) -> list[Record]:
        return await self._list(f"/lke/clusters/{cluster_id}/pools", f"list node pools of cluster {cluster_id}")

    async def create_lke_cluster(self, body: dict[str, Any]) -> Record:
        return await self._post("/lke/clusters", "create LKE cluster", body)

    async def update_lke_cluster(self, cluster_id: int, body: dict[str, Any]) -> Record:
        return await self._put(f"/lke/clusters/{cluster_id}", f"update LKE cluster {cluster_id}", body)

    async def delete_lke_cluster(self, cluster_id: int) -> None:
        await self._delete(f"/lke/clusters/{cluster_id}", f"delete LKE cluster {cluster_id}")

    async def get_lke_kubeconfig(self, cluster_id: int) -> Record:
        return await self._get(f"/lke/clusters/{cluster_id}/kubeconfig", f"get kubeconfig of cluster {cluster_id}")

    async def create_lke_node_pool(self, cluster_id: int, body: dict[str, Any]) -> Record:
        return await self._post(f"/lke/clusters/{cluster_id}/pools", f"create node pool in cluster {cluster_id}", body)

    async def delete_lke_node_pool(self, cluster_id: int, pool_id: int) -> None:
        await self._delete(f"/lke/clusters/{cluster_id}/pools/{pool_id}", f"delete node pool {pool_id}")

    async def update_lke_node_pool(self, cluster_id: int, pool_id: int, body: dict[str, Any]) -> Record:
        return await self._put(
            f"/lke/clusters/{cluster_id}/pools/{pool_id}", f"update node pool {pool_id}", body
        )

    # ------------------------------------------------------------------
    # Managed databases
    # ------------------------------------------------------------------

    async def list_databases(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/databases/instances", "list databases", opts)

    async def list_engine_databases(self, engine: str, opts: ListOptions | None = None) -> list[Record]:
        """List databases of one engine (``mysql`` or ``postgresql``)."""
        return await self._list(f"/databases/{engine}/instances", f"list {engine} databases", opts)

    async def get_engine_database(self, engine: str, database_id: int) -> Record:
        return await self._get(f"/databases/{engine}/instances/{database_id}", f"get {engine} database {database_id}")

    async def get_engine_database_credentials(self, engine: str, database_id: int) -> Record:
        return await self._get(
            f"/databases/{engine}/instances/{database_id}/credentials",
            f"get credentials of {engine} database {database_id}",
        )

    async def create_engine_database(self, engine: str, body: dict[str, Any]) -> Record:
        return await self._post(f"/databases/{engine}/instances", f"create {engine} database", body)

    async def update_engine_database(self, engine: str, database_id: int, body: dict[str, Any]) -> Record:
        return await self._put(
            f"/databases/{engine}/instances/{database_id}", f"update {engine} database {database_id}", body
        )

    async def delete_engine_database(self, engine: str, database_id: int) -> None:
        await self._delete(
            f"/databases/{engine}/instances/{database_id}", f"delete {engine} database {database_id}"
        )

    async def reset_engine_database_credentials(self, engine: str, database_id: int) -> None:
        await self._post(
            f"/databases/{engine}/instances/{database_id}/credentials/reset",
            f"reset credentials of {engine} database {database_id}",
        )

    async def list_database_engines(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/databases/engines", "list database engines", opts)

    async def list_database_types(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/databases/types", "list database types", opts)

    # ------------------------------------------------------------------
    # Object storage
    # ------------------------------------------------------------------

    async def list_object_storage_clusters(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/object-storage/clusters", "list object storage clusters", opts)

    async def list_buckets(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/object-storage/buckets", "list buckets", opts)

    async def get_bucket(self, cluster: str, label: str) -> Record:
        return await self._get(f"/object-storage/buckets/{cluster}/{label}", f"get bucket {label}")

    async def create_bucket(self, body: dict[str, Any]) -> Record:
        return await self._post("/object-storage/buckets", "create bucket", body)

    async def delete_bucket(self, cluster: str, label: str) -> None:
        await self._delete(f"/object-storage/buckets/{cluster}/{label}", f"delete bucket {label}")

    async def update_bucket_access(self, cluster: str, label: str, body: dict[str, Any]) -> None:
        await self._put(
            f"/object-storage/buckets/{cluster}/{label}/access", f"update access of bucket {label}", body
        )

    async def list_objects(self, cluster: str, label: str, params: dict[str, Any] | None = None) -> Record:
        """One page of ``object-list``; follow ``next_marker`` while ``is_truncated``."""
        return cast(
            "Record",
            await self._request(
                "GET",
                f"/object-storage/buckets/{cluster}/{label}/object-list",
                operation=f"list objects in bucket {label}",
                params=params,
            ),
        )

    async def create_object_url(self, cluster: str, label: str, body: dict[str, Any]) -> Record:
        return await self._post(
            f"/object-storage/buckets/{cluster}/{label}/object-url",
            f"sign object URL in bucket {label}",
            body,
        )

    async def send_presigned(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> None:
        """Call a pre-signed Object Storage URL without the account credential."""
        headers = {"Content-Type": content_type} if content_type else None
        await self._send(
            method, url, operation=f"{method} object", content=content, headers=headers, auth=None
        )

    async def list_object_storage_keys(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/object-storage/keys", "list object storage keys", opts)

    async def get_object_storage_key(self, key_id: int) -> Record:
        return await self._get(f"/object-storage/keys/{key_id}", f"get object storage key {key_id}")

    async def create_object_storage_key(self, body: dict[str, Any]) -> Record:
        return await self._post("/object-storage/keys", "create object storage key", body)

    async def delete_object_storage_key(self, key_id: int) -> None:
        await self._delete(f"/object-storage/keys/{key_id}", f"revoke object storage key {key_id}")

    async def update_object_storage_key(self, key_id: int, body: dict[str, Any]) -> Record:
        return await self._put(f"/object-storage/keys/{key_id}", f"update object storage key {key_id}", body)

    # ------------------------------------------------------------------
    # Longview
    # ------------------------------------------------------------------

    async def list_longview_clients(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/longview/clients", "list longview clients", opts)

    async def get_longview_client(self, client_id: int) -> Record:
        return await self._get(f"/longview/clients/{client_id}", f"get longview client {client_id}")

    async def create_longview_client(self, body: dict[str, Any]) -> Record:
        return await self._post("/longview/clients", "create longview client", body)

    async def delete_longview_client(self, client_id: int) -> None:
        await self._delete(f"/longview/clients/{client_id}", f"delete longview client {client_id}")

    async def update_longview_client(self, client_id: int, body: dict[str, Any]) -> Record:
        return await self._put(f"/longview/clients/{client_id}", f"update longview client {client_id}", body)

    # ------------------------------------------------------------------
    # Support
    # ------------------------------------------------------------------

    async def list_support_tickets(self, opts: ListOptions | None = None) -> list[Record]:
        return await self._list("/support/tickets", "list support tickets", opts)

    async def get_support_ticket(self, ticket_id: int) -> Record:
        return await self._get(f"/support/tickets/{ticket_id}", f"get support ticket {ticket_id}")

    async def create_support_ticket(self, body: dict[str, Any]) -> Record:
        return await self._post("/support/tickets", "open support ticket", body)

    async def reply_support_ticket(self, ticket_id: int, description: str) -> Record:
        return await self._post(
            f"/support/tickets/{ticket_id}/replies",
            f"reply to support ticket {ticket_id}",
            {"description": description},
        )


def _error_message(response: httpx.Response) -> str:
    """Extract the provider's ``errors[].reason`` list, or fall back to the reason phrase."""
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.reason_phrase or "request failed"
    errors = payload.get("errors") if isinstance(payload, dict) else None
    if not errors:
        return response.reason_phrase or "request failed"
    parts: list[str] = []
    for err in errors:
        reason = str(err.get("reason", "")).strip()
        field = err.get("field")
        parts.append(f"{reason} ({field})" if field else reason)
    return "; ".join(p for p in parts if p) or response.reason_phrase or "request failed"
