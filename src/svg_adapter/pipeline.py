"""Plugin pipeline over wrapped SVG trees.

Plugins only use the legacy node API: selector queries, attribute
accessors and child splicing. A pipeline is configured by a YAML rule file:

    plugins:
      - name: remove_elements
        selector: "metadata, title"
      - name: default_fill
        color: "#000000"

Plugins run in file order; the pipeline stops after the first plugin that
reports errors.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Literal

import yaml

from .adapter import LegacyNode
from .attributes import AttributeRecord
from .exceptions import InvalidAttributeError, InvalidMutationError
from .navigator import is_ancestor, iter_tree

logger = logging.getLogger(__name__)

PluginName = Literal[
    "remove_raster_images",
    "remove_elements",
    "rename_elements",
    "remove_attributes",
    "set_attributes",
    "default_fill",
]

# Required parameters per plugin
PLUGIN_PARAMS: dict[str, tuple[str, ...]] = {
    "remove_raster_images": (),
    "remove_elements": ("selector",),
    "rename_elements": ("mapping",),
    "remove_attributes": ("attributes",),
    "set_attributes": ("selector", "attributes"),
    "default_fill": (),
}

SHAPE_SELECTOR = "path, rect, circle, ellipse, line, polyline, polygon"

RASTER_HREF_RE = re.compile(
    r"^data:image/(png|jpe?g|gif)[;,]|\.(png|jpe?g|gif)$", re.IGNORECASE
)


@dataclass
class PluginStep:
    """One configured plugin invocation."""

    name: PluginName
    selector: str | None = None
    attributes: list[str] | dict[str, str] | None = None
    mapping: dict[str, str] | None = None
    color: str = "#000000"


@dataclass
class PipelineRule:
    """Complete pipeline configuration."""

    plugins: list[PluginStep] = field(default_factory=list)


@dataclass
class PluginResult:
    """Result of running one plugin."""

    plugin_name: str
    changed_count: int = 0
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


@dataclass
class PipelineReport:
    """Complete pipeline report."""

    step_results: list[PluginResult] = field(default_factory=list)
    skipped_steps: list[str] = field(default_factory=list)
    source: str = ""

    @property
    def has_errors(self) -> bool:
        """Check if any step has errors."""
        return any(r.has_errors for r in self.step_results)

    @property
    def total_changed(self) -> int:
        return sum(r.changed_count for r in self.step_results)

    @property
    def executed_steps(self) -> list[str]:
        """List of steps that were executed."""
        return [r.plugin_name for r in self.step_results]


def parse_plugin_step(data: dict) -> PluginStep:
    """Parse one entry of the plugins list.

    Raises:
        ValueError: If the entry is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("Each plugin entry must be a dictionary")
    if "name" not in data:
        raise ValueError("Each plugin entry must have 'name' field")

    name = data["name"]
    if name not in PLUGIN_PARAMS:
        valid = ", ".join(PLUGIN_PARAMS)
        raise ValueError(f"Unknown plugin '{name}'. Valid plugins: {valid}")

    for param in PLUGIN_PARAMS[name]:
        if param not in data:
            raise ValueError(f"Plugin '{name}' requires '{param}' field")

    step = PluginStep(name=name)

    if "selector" in data:
        step.selector = str(data["selector"])

    if "mapping" in data:
        mapping = data["mapping"]
        if not isinstance(mapping, dict):
            raise ValueError(f"Plugin '{name}': mapping must be a dictionary")
        step.mapping = {str(k): str(v) for k, v in mapping.items()}

    if "attributes" in data:
        attributes = data["attributes"]
        if name == "set_attributes":
            if not isinstance(attributes, dict):
                raise ValueError(
                    "Plugin 'set_attributes': attributes must be a dictionary"
                )
            step.attributes = {str(k): str(v) for k, v in attributes.items()}
        else:
            if not isinstance(attributes, list):
                raise ValueError(f"Plugin '{name}': attributes must be a list")
            step.attributes = [str(item) for item in attributes]

    if "color" in data:
        step.color = str(data["color"])

    return step


def parse_pipeline_section(data: dict) -> PipelineRule:
    """Parse pipeline configuration from YAML data.

    Raises:
        ValueError: If the format is invalid.
    """
    plugins = data.get("plugins", [])
    if not isinstance(plugins, list):
        raise ValueError("'plugins' must be a list")
    return PipelineRule(plugins=[parse_plugin_step(item) for item in plugins])


def parse_pipeline_rule_file(rule_path: Path) -> PipelineRule:
    """Parse a YAML pipeline rule file.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the rule format is invalid.
    """
    with open(rule_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError("Rule file must be a YAML dictionary")

    return parse_pipeline_section(data)


def _is_connected(root: LegacyNode, node: LegacyNode) -> bool:
    """Check that node is still attached below root."""
    return is_ancestor(root, node)


def is_raster_href(href: str) -> bool:
    """Check whether an href points to a raster image."""
    return RASTER_HREF_RE.search(href.strip()) is not None


def remove_raster_images(root: LegacyNode, step: PluginStep) -> PluginResult:
    """Remove image elements that reference raster data."""
    result = PluginResult(plugin_name=step.name)
    for node in root.query_selector_all("image"):
        href = node.attr("href") or node.attr("xlink:href")
        if href is None or not is_raster_href(href.value):
            continue
        if _is_connected(root, node):
            node.detach()
            result.changed_count += 1
    return result


def remove_elements(root: LegacyNode, step: PluginStep) -> PluginResult:
    """Remove every element matching the selector, except the root."""
    result = PluginResult(plugin_name=step.name)
    matches = root.query_selector_all(step.selector or "")
    if not matches:
        result.warnings.append(f"Selector '{step.selector}' matched no elements")
        return result

    for node in matches:
        if node is root:
            result.warnings.append("Refusing to remove the root node")
            continue
        # Descendants of an already removed match go with it.
        if _is_connected(root, node):
            node.detach()
            result.changed_count += 1
    return result


def rename_elements(root: LegacyNode, step: PluginStep) -> PluginResult:
    """Rename elements according to an old -> new name mapping."""
    result = PluginResult(plugin_name=step.name)
    mapping = step.mapping or {}
    for node in iter_tree(root):
        if node.is_element and node.name in mapping:
            node.rename_elem(mapping[node.name])
            result.changed_count += 1
    return result


def remove_attributes(root: LegacyNode, step: PluginStep) -> PluginResult:
    """Remove the named attributes from matching elements."""
    result = PluginResult(plugin_name=step.name)
    if step.selector:
        targets = root.query_selector_all(step.selector)
    else:
        targets = [node for node in iter_tree(root) if node.is_element]

    for node in targets:
        for name in step.attributes or []:
            if node.has_attr(name):
                node.remove_attr(name)
                result.changed_count += 1
    return result


def set_attributes(root: LegacyNode, step: PluginStep) -> PluginResult:
    """Set attributes on every element matching the selector."""
    result = PluginResult(plugin_name=step.name)
    matches = root.query_selector_all(step.selector or "")
    if not matches:
        result.warnings.append(f"Selector '{step.selector}' matched no elements")
        return result

    attributes = step.attributes if isinstance(step.attributes, dict) else {}
    for node in matches:
        for name, value in attributes.items():
            if node.has_attr(name, value):
                continue
            node.add_attr(AttributeRecord(name, value))
            result.changed_count += 1
    return result


def default_fill(root: LegacyNode, step: PluginStep) -> PluginResult:
    """Give shapes without a fill attribute an explicit fill color."""
    result = PluginResult(plugin_name=step.name)
    for node in root.query_selector_all(SHAPE_SELECTOR):
        if not node.has_attr("fill"):
            node.add_attr(AttributeRecord("fill", step.color))
            result.changed_count += 1
    return result


PLUGINS: dict[str, Callable[[LegacyNode, PluginStep], PluginResult]] = {
    "remove_raster_images": remove_raster_images,
    "remove_elements": remove_elements,
    "rename_elements": rename_elements,
    "remove_attributes": remove_attributes,
    "set_attributes": set_attributes,
    "default_fill": default_fill,
}


def run_plugin(root: LegacyNode, step: PluginStep) -> PluginResult:
    """Run a single plugin, recording invalid edits as errors."""
    plugin = PLUGINS[step.name]
    try:
        result = plugin(root, step)
    except (InvalidAttributeError, InvalidMutationError) as e:
        result = PluginResult(plugin_name=step.name)
        result.errors.append(str(e))
    logger.debug(
        "Plugin %s: %d changed, %d warnings, %d errors",
        step.name,
        result.changed_count,
        len(result.warnings),
        len(result.errors),
    )
    return result


def run_pipeline(
    root: LegacyNode,
    rule: PipelineRule,
    steps: list[str] | None = None,
) -> PipelineReport:
    """Run the configured plugins against a wrapped tree.

    Args:
        root: Root of the tree (modified in place).
        rule: Pipeline configuration.
        steps: Plugin names to run (default: all configured plugins).

    Returns:
        PipelineReport with one result per executed plugin.
    """
    report = PipelineReport()

    for step in rule.plugins:
        if steps is not None and step.name not in steps:
            report.skipped_steps.append(f"{step.name} (not requested)")
            continue

        result = run_plugin(root, step)
        report.step_results.append(result)
        if result.has_errors:
            logger.info("Stopping pipeline after errors in %s", step.name)
            break

    return report


def format_pipeline_report(report: PipelineReport) -> str:
    """Format pipeline report as text."""
    lines: list[str] = []
    if report.source:
        lines.append(f"File: {report.source}")
        lines.append("")

    if report.skipped_steps:
        lines.append("Skipped steps:")
        for step in report.skipped_steps:
            lines.append(f"  - {step}")
        lines.append("")

    for result in report.step_results:
        lines.append(f"Plugin: {result.plugin_name}")
        lines.append(f"  Changed: {result.changed_count}")
        for warning in result.warnings:
            lines.append(f"  [WARNING] {warning}")
        for error in result.errors:
            lines.append(f"  [ERROR] {error}")
        lines.append("")

    lines.append("Summary:")
    lines.append(f"  Executed steps: {', '.join(report.executed_steps) or 'none'}")
    lines.append(f"  Total changed: {report.total_changed}")

    if report.has_errors:
        lines.append("")
        lines.append("*** ERRORS DETECTED - pipeline stopped ***")

    return "\n".join(lines)
