"""Fastly API client.

`FastlyClient.request` is the single primitive that talks to the network.
Every other method is a thin wrapper that fixes the HTTP verb and the path
under ``/service/{service_id}``. A few wrappers first resolve the service's
active config version and then act on it.

See https://docs.fastly.com/api/ for more information about the Fastly API.
"""

from __future__ import annotations

import re
from types import TracebackType
from typing import Any, Dict, List, Mapping, Optional, Type, Union
from urllib.parse import quote

import requests
from requests.structures import CaseInsensitiveDict
from structlog import get_logger

from fastlyapi.config import FASTLY_API_ROOT
from fastlyapi.exceptions import (
    InvalidArgumentError,
    NameConflictError,
    NoActiveVersionError,
    TransportError,
)
from fastlyapi.options import RequestOptions

__all__ = ["FastlyClient"]

_ABSOLUTE_URL = re.compile(r"^(http|https)://")

OptionsType = Union[RequestOptions, Mapping[str, Any], None]


def _is_absolute(url: str) -> bool:
    return _ABSOLUTE_URL.match(url) is not None


def _service_path(service_id: str, *parts: Any) -> str:
    """Build ``/service/{service_id}/{part}/...`` with each segment
    percent-quoted.
    """
    segments = ["service", service_id, *parts]
    return "/" + "/".join(quote(str(s), safe="") for s in segments)


def _encode_form(form: Mapping[str, Any]) -> Dict[str, Any]:
    # requests would send True as "True"; the API expects lowercase.
    encoded: Dict[str, Any] = {}
    for key, value in form.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        encoded[key] = value
    return encoded


def _decode(response: requests.Response) -> Any:
    if response.headers.get("Content-Type") == "application/json":
        return response.json()
    return response.text


class FastlyClient:
    """API client for the Fastly REST API.

    Parameters
    ----------
    api_key : str
        The Fastly API key. Only key-based authentication is supported.
    session : requests.Session, optional
        Session used as the HTTP transport. A new one is created if not
        given.

    Raises
    ------
    fastlyapi.exceptions.InvalidArgumentError
        Raised if `api_key` is missing or empty.
    """

    def __init__(
        self, api_key: str, session: Optional[requests.Session] = None
    ) -> None:
        if not api_key:
            raise InvalidArgumentError("Missing API key parameter.")
        self.api_key = api_key
        self.endpoint = FASTLY_API_ROOT
        self.session = session if session is not None else requests.Session()
        self._logger = get_logger(__name__)

    def __enter__(self) -> FastlyClient:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def request(
        self, method: str, url: str, options: OptionsType = None
    ) -> Any:
        """Send a request to the Fastly API, or to any absolute URL.

        Use this method if a convenience method does not already exist for
        your use case.

        Parameters
        ----------
        method : str
            HTTP method, including non-standard ones such as ``PURGE``.
        url : str
            Absolute URL, or a path (``/service/...``) relative to the
            Fastly API endpoint.
        options : RequestOptions or mapping, optional
            Soft purge flag, extra headers, form body and raw transport
            options. A mapping is validated into `RequestOptions`.

        Returns
        -------
        body
            The decoded JSON body if the response's ``Content-Type`` is
            exactly ``application/json``, otherwise the body text.

        Raises
        ------
        fastlyapi.exceptions.InvalidArgumentError
            Raised if `method` or `url` is empty.
        fastlyapi.exceptions.TransportError
            Raised for any non-2xx response.
        requests.RequestException
            Network errors from requests propagate unchanged.
        """
        if not method or not url:
            raise InvalidArgumentError("Missing required request parameters.")

        if options is None:
            options = RequestOptions()
        elif not isinstance(options, RequestOptions):
            options = RequestOptions(**options)

        if not _is_absolute(url):
            url = self.endpoint + url

        headers: CaseInsensitiveDict = CaseInsensitiveDict(
            {"Fastly-Key": self.api_key}
        )
        if options.soft_purge:
            headers["Fastly-Soft-Purge"] = "1"
        if options.headers:
            headers.update(options.headers)

        # Never send the API key to a host other than the API endpoint.
        if not url.startswith(self.endpoint):
            headers.pop("Fastly-Key", None)

        request_kwargs: Dict[str, Any] = {
            "method": method,
            "url": url,
            "headers": headers,
        }
        if options.form is not None:
            request_kwargs["data"] = _encode_form(options.form)
        if options.transport_options:
            request_kwargs.update(options.transport_options)

        self._logger.debug(
            "Fastly request",
            method=request_kwargs.get("method"),
            url=request_kwargs.get("url"),
            soft_purge=options.soft_purge,
        )
        r = self.session.request(**request_kwargs)
        self._logger.info(
            "Fastly response",
            method=request_kwargs.get("method"),
            url=request_kwargs.get("url"),
            status=r.status_code,
        )

        if not 200 <= r.status_code < 300:
            method = request_kwargs.get("method")
            url = request_kwargs.get("url")
            raise TransportError(
                f"{r.status_code} {r.reason} for {method} {url}", response=r
            )
        return _decode(r)

    # Purging

    def purge(self, url: str, soft_purge: bool = False) -> Any:
        """Purge a single URL from the cache.

        Parameters
        ----------
        url : str
            Fully qualified URL of the cached resource (on your own domain,
            not the API). The API key is not sent with this request.
        soft_purge : bool
            Mark the content stale instead of removing it.

        Raises
        ------
        fastlyapi.exceptions.InvalidArgumentError
            Raised if `url` is not absolute.
        """
        if not _is_absolute(url):
            raise InvalidArgumentError(
                "Standard purge requests should be absolute urls."
            )
        self._logger.info("Fastly URL purge", url=url, soft_purge=soft_purge)
        return self.request(
            "PURGE", url, RequestOptions(soft_purge=soft_purge)
        )

    def purge_all(self, service_id: str) -> Any:
        """Hard purge all objects from a service."""
        self._logger.info("Fastly purge all", service_id=service_id)
        return self.request("POST", _service_path(service_id, "purge_all"))

    def purge_key(
        self, service_id: str, surrogate_key: str, soft_purge: bool = False
    ) -> Any:
        """Purge URLs tagged with a given `surrogate_key`.

        See
        https://docs.fastly.com/api/purge#purge_077dfb4aa07f49792b13c87647415537
        for more information.
        """
        path = _service_path(service_id, "purge", surrogate_key)
        self._logger.info(
            "Fastly key purge",
            path=path,
            surrogate_key=surrogate_key,
            soft_purge=soft_purge,
        )
        return self.request(
            "POST", path, RequestOptions(soft_purge=soft_purge)
        )

    # Config versions

    def get_config_versions(self, service_id: str) -> List[Dict[str, Any]]:
        """List all config versions of a service."""
        return self.request("GET", _service_path(service_id, "version"))

    def get_config_version(
        self, service_id: str, version: int
    ) -> Dict[str, Any]:
        return self.request(
            "GET", _service_path(service_id, "version", version)
        )

    def get_active_config_version(
        self, service_id: str
    ) -> Optional[Dict[str, Any]]:
        """Get the active config version of a service.

        Returns
        -------
        version : dict or None
            The first version whose ``active`` field is `True`, or `None`
            if no version is active.
        """
        versions = self.get_config_versions(service_id)
        return next((v for v in versions if v.get("active") is True), None)

    def validate_config_version(
        self, service_id: str, version: int
    ) -> Dict[str, Any]:
        return self.request(
            "GET", _service_path(service_id, "version", version, "validate")
        )

    def create_config_version(self, service_id: str) -> Dict[str, Any]:
        """Create a new, empty config version."""
        self._logger.info("Fastly create version", service_id=service_id)
        return self.request("POST", _service_path(service_id, "version"))

    def update_config_version(
        self,
        service_id: str,
        version: int,
        deployed: bool,
        staging: bool,
        testing: bool,
    ) -> Dict[str, Any]:
        """Update the deployed, staging and testing flags of a config
        version.
        """
        form = {"deployed": deployed, "staging": staging, "testing": testing}
        self._logger.info(
            "Fastly update version",
            service_id=service_id,
            version=version,
            **form,
        )
        return self.request(
            "PUT",
            _service_path(service_id, "version", version),
            RequestOptions(form=form),
        )

    def activate_config_version(
        self, service_id: str, version: int
    ) -> Dict[str, Any]:
        self._logger.info(
            "Fastly activate version", service_id=service_id, version=version
        )
        return self.request(
            "PUT", _service_path(service_id, "version", version, "activate")
        )

    def deactivate_config_version(
        self, service_id: str, version: int
    ) -> Dict[str, Any]:
        self._logger.info(
            "Fastly deactivate version",
            service_id=service_id,
            version=version,
        )
        return self.request(
            "PUT",
            _service_path(service_id, "version", version, "deactivate"),
        )

    def clone_config_version(
        self, service_id: str, version: Optional[int] = None
    ) -> Dict[str, Any]:
        """Clone a config version into a new, editable version.

        Parameters
        ----------
        service_id : str
            The Fastly service ID.
        version : int, optional
            Version to clone. Defaults to the active version.

        Raises
        ------
        fastlyapi.exceptions.NoActiveVersionError
            Raised if `version` is not given and no version is active.
        """
        version = self._resolve_version(service_id, version)
        self._logger.info(
            "Fastly clone version", service_id=service_id, version=version
        )
        return self.request(
            "PUT", _service_path(service_id, "version", version, "clone")
        )

    def lock_config_version(
        self, service_id: str, version: int
    ) -> Dict[str, Any]:
        self._logger.info(
            "Fastly lock version", service_id=service_id, version=version
        )
        return self.request(
            "PUT", _service_path(service_id, "version", version, "lock")
        )

    # VCL

    def get_boilerplate_vcl(self, service_id: str, version: int) -> str:
        """Get the boilerplate VCL for a config version, as text."""
        return self.request(
            "GET",
            _service_path(service_id, "version", version, "boilerplate"),
        )

    def get_all_vcl(
        self, service_id: str, version: int
    ) -> List[Dict[str, Any]]:
        return self.request(
            "GET", _service_path(service_id, "version", version, "vcl")
        )

    def get_vcl(
        self, service_id: str, version: int, name: str
    ) -> Dict[str, Any]:
        return self.request(
            "GET", _service_path(service_id, "version", version, "vcl", name)
        )

    def get_main_vcl(
        self, service_id: str, version: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """Get the VCL file flagged as main, or `None` if there is none.

        `version` defaults to the active config version.
        """
        version = self._resolve_version(service_id, version)
        vcls = self.get_all_vcl(service_id, version)
        return next((v for v in vcls if v.get("main") is True), None)

    def set_main_vcl(
        self, service_id: str, name: str, version: Optional[int] = None
    ) -> Dict[str, Any]:
        """Flag the VCL file `name` as main.

        `version` defaults to the active config version.
        """
        version = self._resolve_version(service_id, version)
        self._logger.info(
            "Fastly set main VCL",
            service_id=service_id,
            version=version,
            name=name,
        )
        return self.request(
            "PUT",
            _service_path(service_id, "version", version, "vcl", name, "main"),
        )

    def upload_new_vcl(
        self,
        service_id: str,
        version: int,
        name: str,
        content: str,
        set_main: bool = False,
    ) -> Dict[str, Any]:
        """Upload a new VCL file to a config version.

        The name is checked first with `get_vcl`: a 404 means the name is
        free.

        Parameters
        ----------
        service_id : str
            The Fastly service ID.
        version : int
            An unlocked config version.
        name : str
            Name of the new VCL file.
        content : str
            VCL source.
        set_main : bool
            Also flag the new file as main.

        Returns
        -------
        vcl : dict
            The created VCL, or the result of `set_main_vcl` when `set_main`
            is `True`.

        Raises
        ------
        fastlyapi.exceptions.NameConflictError
            Raised if a VCL file named `name` already exists.
        fastlyapi.exceptions.TransportError
            Raised if the name lookup fails with a status other than 404,
            or if the upload itself fails.
        """
        try:
            self.get_vcl(service_id, version, name)
        except TransportError as e:
            if e.status_code != 404:
                raise
        else:
            raise NameConflictError(service_id, version, name)

        self._logger.info(
            "Fastly upload VCL",
            service_id=service_id,
            version=version,
            name=name,
        )
        vcl = self.request(
            "POST",
            _service_path(service_id, "version", version, "vcl"),
            RequestOptions(form={"name": name, "content": content}),
        )
        if set_main:
            return self.set_main_vcl(service_id, name, version)
        return vcl

    def update_vcl(
        self,
        service_id: str,
        version: int,
        name: str,
        content: str,
        set_main: bool = False,
    ) -> Dict[str, Any]:
        """Replace the content of an existing VCL file, optionally flagging
        it as main afterwards.
        """
        self._logger.info(
            "Fastly update VCL",
            service_id=service_id,
            version=version,
            name=name,
        )
        vcl = self.request(
            "PUT",
            _service_path(service_id, "version", version, "vcl", name),
            RequestOptions(form={"content": content}),
        )
        if set_main:
            return self.set_main_vcl(service_id, name, version)
        return vcl

    def delete_vcl(
        self, service_id: str, name: str, version: Optional[int] = None
    ) -> Dict[str, Any]:
        """Delete the VCL file `name`.

        `version` defaults to the active config version.
        """
        version = self._resolve_version(service_id, version)
        self._logger.info(
            "Fastly delete VCL",
            service_id=service_id,
            version=version,
            name=name,
        )
        return self.request(
            "DELETE",
            _service_path(service_id, "version", version, "vcl", name),
        )

    def _resolve_version(self, service_id: str, version: Optional[int]) -> int:
        """Return `version`, or the active version's number if it is
        `None`.
        """
        if version is not None:
            return version
        active = self.get_active_config_version(service_id)
        if active is None:
            raise NoActiveVersionError(
                f"Service {service_id} has no active config version"
            )
        return active["number"]
