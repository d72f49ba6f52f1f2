"""
Built-in exporters for spans, log records and metrics.

The OTLP exporters are transport collaborators: this module only maps the
document's fields onto their constructors. Marshaling, retries and
compression are handled inside the OpenTelemetry exporter packages.

Timeouts in documents are milliseconds; the Python exporters take seconds.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

import grpc
import requests
from requests.auth import AuthBase
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import (
    OTLPLogExporter as GrpcLogExporter,
)
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
    OTLPMetricExporter as GrpcMetricExporter,
)
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter as GrpcSpanExporter,
)
from opentelemetry.exporter.otlp.proto.http import Compression as HttpCompression
from opentelemetry.exporter.otlp.proto.http._log_exporter import (
    OTLPLogExporter as HttpLogExporter,
)
from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
    OTLPMetricExporter as HttpMetricExporter,
)
from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
    OTLPSpanExporter as HttpSpanExporter,
)
from opentelemetry.sdk._logs.export import ConsoleLogExporter
from opentelemetry.sdk.metrics import (
    Counter,
    Histogram,
    ObservableCounter,
    ObservableGauge,
    ObservableUpDownCounter,
    UpDownCounter,
)
from opentelemetry.sdk.metrics.export import AggregationTemporality, ConsoleMetricExporter
from opentelemetry.sdk.metrics.view import (
    ExplicitBucketHistogramAggregation,
    ExponentialBucketHistogramAggregation,
)
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from pydantic import Field, model_validator

from ..model.components import FrozenModel
from ..utils import parse_key_value_list


CompressionName = Literal["gzip", "deflate", "none"]
TemporalityPreference = Literal["cumulative", "delta", "low_memory"]
HistogramAggregationName = Literal[
    "explicit_bucket_histogram", "base2_exponential_bucket_histogram"
]

_GRPC_COMPRESSION = {
    "gzip": grpc.Compression.Gzip,
    "deflate": grpc.Compression.Deflate,
    "none": grpc.Compression.NoCompression,
}


class NameValueModel(FrozenModel):
    name: str
    value: Optional[str] = None


class OtlpExporterConfig(FrozenModel):
    """Fields shared by the OTLP exporters."""

    endpoint: Optional[str] = None
    certificate_file: Optional[str] = None
    client_key_file: Optional[str] = None
    client_certificate_file: Optional[str] = None
    headers: List[NameValueModel] = Field(default_factory=list)
    headers_list: Optional[str] = None
    compression: Optional[CompressionName] = None
    timeout: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _client_tls_pair(self) -> "OtlpExporterConfig":
        if bool(self.client_key_file) != bool(self.client_certificate_file):
            raise ValueError(
                "client_key_file and client_certificate_file must be set together"
            )
        return self

    def header_dict(self) -> Dict[str, str]:
        """Constant headers; entries in 'headers' win over 'headers_list'."""
        headers = parse_key_value_list(self.headers_list, what="header")
        for header in self.headers:
            if header.value is not None:
                headers[header.name] = header.value
        return headers

    def timeout_seconds(self) -> Optional[float]:
        if self.timeout is None:
            return None
        return self.timeout / 1000.0


class OtlpHttpExporterConfig(OtlpExporterConfig):
    encoding: Literal["protobuf"] = "protobuf"
    # Called before every export request; only settable programmatically
    headers_supplier: Optional[Callable[[], Mapping[str, str]]] = None


class OtlpGrpcExporterConfig(OtlpExporterConfig):
    insecure: Optional[bool] = None


class OtlpHttpMetricExporterConfig(OtlpHttpExporterConfig):
    temporality_preference: Optional[TemporalityPreference] = None
    default_histogram_aggregation: Optional[HistogramAggregationName] = None


class OtlpGrpcMetricExporterConfig(OtlpGrpcExporterConfig):
    temporality_preference: Optional[TemporalityPreference] = None
    default_histogram_aggregation: Optional[HistogramAggregationName] = None


class ConsoleExporterConfig(FrozenModel):
    pass


class ConsoleMetricExporterConfig(FrozenModel):
    temporality_preference: Optional[TemporalityPreference] = None
    default_histogram_aggregation: Optional[HistogramAggregationName] = None


class SuppliedHeadersAuth(AuthBase):
    """Adds the headers returned by a supplier to each outgoing request."""

    def __init__(self, supplier: Callable[[], Mapping[str, str]]):
        self.supplier = supplier

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request.headers.update(self.supplier() or {})
        return request


def _http_kwargs(settings: OtlpHttpExporterConfig) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "endpoint": settings.endpoint,
        "certificate_file": settings.certificate_file,
        "client_key_file": settings.client_key_file,
        "client_certificate_file": settings.client_certificate_file,
        "headers": settings.header_dict() or None,
        "timeout": settings.timeout_seconds(),
    }
    if settings.compression is not None:
        kwargs["compression"] = HttpCompression(settings.compression)
    if settings.headers_supplier is not None:
        session = requests.Session()
        session.auth = SuppliedHeadersAuth(settings.headers_supplier)
        kwargs["session"] = session
    return kwargs


def _grpc_credentials(settings: OtlpExporterConfig) -> Optional[grpc.ChannelCredentials]:
    if not (settings.certificate_file or settings.client_key_file):
        return None

    def read(path: Optional[str]) -> Optional[bytes]:
        return Path(path).read_bytes() if path else None

    return grpc.ssl_channel_credentials(
        root_certificates=read(settings.certificate_file),
        private_key=read(settings.client_key_file),
        certificate_chain=read(settings.client_certificate_file),
    )


def _grpc_kwargs(settings: OtlpGrpcExporterConfig) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "endpoint": settings.endpoint,
        "insecure": settings.insecure,
        "credentials": _grpc_credentials(settings),
        "headers": settings.header_dict() or None,
        "timeout": settings.timeout_seconds(),
    }
    if settings.compression is not None:
        kwargs["compression"] = _GRPC_COMPRESSION[settings.compression]
    return kwargs


def metric_export_preferences(
    temporality_preference: Optional[str],
    default_histogram_aggregation: Optional[str],
) -> Dict[str, Any]:
    """
    Map document preferences onto metric exporter keyword arguments.

    Returns:
        Dict with 'preferred_temporality' and/or 'preferred_aggregation'
    """
    kwargs: Dict[str, Any] = {}
    cumulative = AggregationTemporality.CUMULATIVE
    delta = AggregationTemporality.DELTA

    if temporality_preference == "cumulative":
        kwargs["preferred_temporality"] = {
            Counter: cumulative,
            UpDownCounter: cumulative,
            Histogram: cumulative,
            ObservableCounter: cumulative,
            ObservableUpDownCounter: cumulative,
            ObservableGauge: cumulative,
        }
    elif temporality_preference == "delta":
        kwargs["preferred_temporality"] = {
            Counter: delta,
            UpDownCounter: cumulative,
            Histogram: delta,
            ObservableCounter: delta,
            ObservableUpDownCounter: cumulative,
            ObservableGauge: cumulative,
        }
    elif temporality_preference == "low_memory":
        kwargs["preferred_temporality"] = {
            Counter: delta,
            UpDownCounter: cumulative,
            Histogram: delta,
            ObservableCounter: cumulative,
            ObservableUpDownCounter: cumulative,
            ObservableGauge: cumulative,
        }

    if default_histogram_aggregation == "explicit_bucket_histogram":
        kwargs["preferred_aggregation"] = {Histogram: ExplicitBucketHistogramAggregation()}
    elif default_histogram_aggregation == "base2_exponential_bucket_histogram":
        kwargs["preferred_aggregation"] = {
            Histogram: ExponentialBucketHistogramAggregation()
        }

    return kwargs


# Span exporters


def create_otlp_http_span_exporter(config: Dict[str, Any]) -> HttpSpanExporter:
    settings = OtlpHttpExporterConfig.model_validate(config)
    return HttpSpanExporter(**_http_kwargs(settings))


def create_otlp_grpc_span_exporter(config: Dict[str, Any]) -> GrpcSpanExporter:
    settings = OtlpGrpcExporterConfig.model_validate(config)
    return GrpcSpanExporter(**_grpc_kwargs(settings))


def create_console_span_exporter(config: Dict[str, Any]) -> ConsoleSpanExporter:
    ConsoleExporterConfig.model_validate(config)
    return ConsoleSpanExporter()


# Log record exporters


def create_otlp_http_log_exporter(config: Dict[str, Any]) -> HttpLogExporter:
    settings = OtlpHttpExporterConfig.model_validate(config)
    return HttpLogExporter(**_http_kwargs(settings))


def create_otlp_grpc_log_exporter(config: Dict[str, Any]) -> GrpcLogExporter:
    settings = OtlpGrpcExporterConfig.model_validate(config)
    return GrpcLogExporter(**_grpc_kwargs(settings))


def create_console_log_exporter(config: Dict[str, Any]) -> ConsoleLogExporter:
    ConsoleExporterConfig.model_validate(config)
    return ConsoleLogExporter()


# Metric exporters


def create_otlp_http_metric_exporter(config: Dict[str, Any]) -> HttpMetricExporter:
    settings = OtlpHttpMetricExporterConfig.model_validate(config)
    return HttpMetricExporter(
        **_http_kwargs(settings),
        **metric_export_preferences(
            settings.temporality_preference, settings.default_histogram_aggregation
        ),
    )


def create_otlp_grpc_metric_exporter(config: Dict[str, Any]) -> GrpcMetricExporter:
    settings = OtlpGrpcMetricExporterConfig.model_validate(config)
    return GrpcMetricExporter(
        **_grpc_kwargs(settings),
        **metric_export_preferences(
            settings.temporality_preference, settings.default_histogram_aggregation
        ),
    )


def create_console_metric_exporter(config: Dict[str, Any]) -> ConsoleMetricExporter:
    settings = ConsoleMetricExporterConfig.model_validate(config)
    return ConsoleMetricExporter(
        **metric_export_preferences(
            settings.temporality_preference, settings.default_histogram_aggregation
        )
    )
