"""Core tree building implementation for array-to-XML encoding.

This module walks nested input data depth-first and materializes it into the
output element tree. Every key is routed through the name policy, so each
element and attribute name that reaches the document is a legal XML name, and
no input shape can make the walk fail.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from array_to_xml.naming import NamePolicy, NameStrategy
from array_to_xml.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    EncoderConfig,
    EncodingMetrics,
    get_logger,
)
from array_to_xml.tree.document import XMLDocument, XMLElement
from array_to_xml.tree.nodes import (
    PlainContainer,
    Scalar,
    TaggedContainer,
    classify,
    is_scalar,
    render_scalar,
)

MS_PER_SECOND = 1000

_logger = get_logger(__name__)


@dataclass
class EncodeResult:
    """Result object for a single encode operation.

    Encoding never fails on input content, so ``success`` is only false when
    an unexpected internal error was caught by the API layer. Repairs made to
    the input are listed in ``diagnostics``.
    """

    xml: str = ""
    document: XMLDocument = field(default_factory=XMLDocument)
    success: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: EncodingMetrics = field(default_factory=EncodingMetrics)
    correlation_id: Optional[str] = None

    def __str__(self) -> str:
        return self.xml

    @property
    def root(self) -> Optional[XMLElement]:
        return self.document.root

    @property
    def has_repairs(self) -> bool:
        """Check if any key was sanitized or any input was dropped."""
        return bool(
            self.metrics.names_sanitized
            or self.metrics.truncated_branches
            or self.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            path=path,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the encode result."""
        by_severity: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            name = diagnostic.severity.name
            by_severity[name] = by_severity.get(name, 0) + 1

        return {
            "success": self.success,
            "root": self.root.tag if self.root else None,
            "metrics": self.metrics.to_dict(),
            "diagnostics_by_severity": by_severity,
            "has_repairs": self.has_repairs,
        }


class ArrayTreeBuilder:
    """Builds an output element tree from nested input data.

    A builder holds no state between calls: each ``build`` creates a fresh
    document and result, so one instance may be reused for many inputs.
    """

    def __init__(self, config: Optional[EncoderConfig] = None) -> None:
        self.config = config or EncoderConfig()
        self.policy = NamePolicy(self.config)
        self.logger = _logger.bind(self.config.correlation_id)

    def build(self, data: Any) -> EncodeResult:
        """Build the element tree for ``data``.

        Args:
            data: Mapping, sequence or already classified input node

        Returns:
            EncodeResult holding the document tree (``xml`` is left empty;
            serialization is done by the API layer)
        """
        start_time = time.time()
        config = self.config
        result = EncodeResult(correlation_id=config.correlation_id)

        root = XMLElement(tag=self.policy.resolve_root())
        result.document = XMLDocument(
            root=root,
            version=config.version,
            encoding=config.encoding,
            correlation_id=config.correlation_id,
        )
        result.metrics.elements_created = 1

        node = classify(data)
        if isinstance(node, TaggedContainer):
            # The root element comes from configuration; reserved keys at
            # the top level are ordinary entries
            node = node.as_plain()
        if isinstance(node, PlainContainer):
            self._append_entries(root, node, result)

        result.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self.logger.debug(
            "Element tree built",
            extra={
                "root": root.tag,
                "elements": result.metrics.elements_created,
                "names_sanitized": result.metrics.names_sanitized,
            }
        )
        return result

    def _append_entries(
        self,
        root: XMLElement,
        container: PlainContainer,
        result: EncodeResult
    ) -> None:
        """Walk ``container`` depth-first, appending elements below ``root``.

        Open containers are kept on an explicit stack together with the
        slash-separated path of their element, so nesting depth is bounded
        only by ``max_depth`` and diagnostic paths are built incrementally.
        """
        metrics = result.metrics
        metrics.max_depth_reached = max(metrics.max_depth_reached, 1)
        stack: List[Tuple[XMLElement, Iterator[Tuple[Any, Any]], int, str]] = [
            (root, container.items(), 1, f"/{root.tag}")
        ]

        while stack:
            parent, entries, depth, path = stack[-1]
            entry = next(entries, None)
            if entry is None:
                stack.pop()
                continue

            key, node = entry
            metrics.entries_processed += 1
            name = self._resolve_name(key, path, result)

            if isinstance(node, Scalar):
                self._append(parent, XMLElement(tag=name, text=node.text), result)
                continue

            attributes: Tuple[Tuple[Any, Any], ...] = ()
            if isinstance(node, TaggedContainer):
                self._report_discarded(node, path, result)
                attributes = node.attributes
                if isinstance(node.value, Scalar):
                    element = XMLElement(tag=name, cdata=node.cdata)
                    element.text = node.value.text
                    if node.cdata:
                        metrics.cdata_sections += 1
                    self._apply_attributes(element, attributes, result)
                    self._append(parent, element, result)
                    continue
                node = node.value
                if isinstance(node, TaggedContainer):
                    node = node.as_plain()

            element = XMLElement(tag=name)
            self._apply_attributes(element, attributes, result)
            self._append(parent, element, result)

            if not isinstance(node, PlainContainer) or not len(node):
                continue
            element_path = f"{path}/{name}"
            if depth >= self.config.max_depth:
                metrics.truncated_branches += 1
                self.logger.warning(
                    "Maximum nesting depth reached, branch left empty",
                    extra={"path": element_path, "max_depth": self.config.max_depth}
                )
                result.add_diagnostic(
                    DiagnosticSeverity.WARNING,
                    f"Nesting deeper than {self.config.max_depth} levels was not encoded",
                    "tree_builder",
                    path=element_path,
                    details={"skipped_entries": len(node)},
                )
                continue

            metrics.max_depth_reached = max(metrics.max_depth_reached, depth + 1)
            stack.append((element, node.items(), depth + 1, element_path))

    def _resolve_name(self, key: Any, path: str, result: EncodeResult) -> str:
        resolved = self.policy.resolve(key)

        if resolved.strategy is NameStrategy.NUMERIC:
            result.metrics.numeric_names += 1
        elif resolved.was_repaired:
            result.metrics.names_sanitized += 1
            self.logger.debug(
                "Key sanitized",
                extra={"key": resolved.original, "tag": resolved.name}
            )
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                f"Key '{resolved.original}' renamed to '{resolved.name}'",
                "name_policy",
                path=path,
                details={"key": resolved.original, "name": resolved.name},
            )

        return resolved.name

    def _apply_attributes(
        self,
        element: XMLElement,
        attributes: Tuple[Tuple[Any, Any], ...],
        result: EncodeResult
    ) -> None:
        for attribute_name, attribute_value in attributes:
            name = self.policy.resolve_attribute(attribute_name)
            if is_scalar(attribute_value):
                value = render_scalar(attribute_value) or ""
            else:
                value = ""
            element.set_attribute(name, value)
            result.metrics.attributes_created += 1

    def _append(self, parent: XMLElement, element: XMLElement, result: EncodeResult) -> None:
        parent.add_child(element)
        result.metrics.elements_created += 1

    def _report_discarded(
        self, node: TaggedContainer, path: str, result: EncodeResult
    ) -> None:
        if not node.discarded_keys:
            return
        keys = [str(key) for key in node.discarded_keys]
        result.add_diagnostic(
            DiagnosticSeverity.WARNING,
            "Entries next to '@value' are ignored: " + ", ".join(keys),
            "tree_builder",
            path=path,
            details={"discarded_keys": keys},
        )


def build_tree(data: Any, config: Optional[EncoderConfig] = None) -> EncodeResult:
    """Build the element tree for ``data`` with a one-off builder."""
    return ArrayTreeBuilder(config).build(data)


__all__ = ["ArrayTreeBuilder", "EncodeResult", "build_tree"]
