"""
Main API interface for nsflatten

Provides a unified facade over the transforms: build the per-file pipeline
from configuration, convert source text or files, and write results.
"""

import fnmatch
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import NsFlattenConfig
from .interfaces import DiagnosticCollector, DiagnosticKind, LoggingDiagnosticListener
from .syntax.module import TransformError
from .syntax.parser import is_valid_source
from .transforms.executor import ConversionExecutor
from .transforms.global_require import AddRequireForGlobalIdentifier, parse_identifier_sequence
from .transforms.namespaced_class import NamespacedClassFlattener
from .transforms.pipeline import TransformPipeline
from .transforms.root_namespace import RootNamespaceTransform, TransformReport

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Standardized conversion result structure."""

    success: bool
    file_path: Optional[str] = None
    output: Optional[str] = None
    changed: bool = False
    diagnostics: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "file_path": self.file_path,
            "changed": self.changed,
            "diagnostics": self.diagnostics,
            "errors": self.errors,
            "warnings": self.warnings,
            "metadata": self.metadata,
        }


def _matches(relative: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        pattern = pattern.replace("\\", "/")
        if fnmatch.fnmatch(relative, pattern):
            return True
        # "**/x" also matches x at the top level
        if pattern.startswith("**/") and fnmatch.fnmatch(relative, pattern[3:]):
            return True
    return False


def fully_qualified_name_for(path: Path, source_root: Optional[Path]) -> Optional[str]:
    """``src/my/name/space/Widget.js`` under ``src`` -> ``my.name.space.Widget``."""
    if source_root is None:
        return None
    try:
        relative = path.resolve().relative_to(source_root.resolve())
    except ValueError:
        return None
    parts = list(relative.with_suffix("").parts)
    if len(parts) < 2:
        return None
    return ".".join(parts)


class NamespaceFlattener:
    """
    Main API class for nsflatten.

    Every conversion runs the same pipeline: the module's own class name is
    flattened first (when its fully qualified name is known), then all
    namespaced references under the configured roots become requires, and
    finally requires for configured library globals are added.
    """

    def __init__(self, config: Optional[NsFlattenConfig] = None):
        """
        Args:
            config: Optional configuration object. If None, uses default configuration.
        """
        self.config = config or NsFlattenConfig.default()
        self.global_requires = {
            parse_identifier_sequence(dotted): module_id
            for dotted, module_id in self.config.namespace_settings.global_requires.items()
        }

    def build_pipeline(
        self,
        class_name: str,
        fully_qualified_name: Optional[str] = None,
        listener: Optional[DiagnosticCollector] = None,
    ) -> TransformPipeline:
        settings = self.config.namespace_settings
        pipeline = TransformPipeline()

        if settings.flatten_class and fully_qualified_name:
            pipeline.add(NamespacedClassFlattener(fully_qualified_name, listener))

        pipeline.add(
            RootNamespaceTransform(
                settings.namespace_roots,
                class_name,
                insert_export=settings.insert_export,
                reserved_globals=settings.reserved_globals,
                listener=listener,
            )
        )

        if self.global_requires:
            pipeline.add(AddRequireForGlobalIdentifier(self.global_requires, listener))

        return pipeline

    def convert_source(
        self,
        source: str,
        class_name: str,
        fully_qualified_name: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> ConversionResult:
        """
        Convert one module's source text.

        Syntax errors and edit conflicts produce a failed result instead of
        raising.
        """
        collector = DiagnosticCollector(forward_to=LoggingDiagnosticListener(logging.DEBUG))
        result = ConversionResult(success=False, file_path=file_path)
        result.metadata = {
            "class_name": class_name,
            "fully_qualified_name": fully_qualified_name,
            "timestamp": datetime.now().isoformat(),
        }

        if not self.config.namespace_settings.namespace_roots:
            result.warnings.append("No namespace roots configured, only exports are resolved")

        try:
            pipeline_result = self.build_pipeline(class_name, fully_qualified_name, collector).run(source)
        except TransformError as e:
            logger.error(f"Conversion failed for {file_path or class_name}: {e}")
            result.errors.append(str(e))
            return result

        if not is_valid_source(pipeline_result.output):
            result.errors.append("Converted module no longer parses")
            return result

        for name, outcome in pipeline_result.step_results:
            if isinstance(outcome, TransformReport):
                result.metadata["module_variable_ids"] = outcome.module_variable_ids
                result.metadata["references_rewritten"] = outcome.references_rewritten
                result.metadata["export_added"] = outcome.export_added
            else:
                result.metadata[name] = outcome

        result.success = True
        result.output = pipeline_result.output
        result.changed = pipeline_result.changed
        result.diagnostics = [d.to_dict() for d in collector.diagnostics]
        result.warnings.extend(str(d) for d in collector.of_kind(DiagnosticKind.UNTRANSFORMED_SHAPE))
        return result

    def convert_file(
        self,
        file_path: Union[str, Path],
        source_root: Optional[Union[str, Path]] = None,
        class_name: Optional[str] = None,
    ) -> ConversionResult:
        """
        Read and convert a single file without writing it.

        Args:
            file_path: JavaScript file to convert
            source_root: Directory the namespace layout starts from; used to
                derive the fully qualified class name
            class_name: Exported class name, defaults to the file stem
        """
        path = Path(file_path)
        file_settings = self.config.file_settings

        try:
            size = path.stat().st_size
            if size > file_settings.max_file_size:
                return ConversionResult(
                    success=True,
                    file_path=str(path),
                    warnings=[f"Skipped: {size} bytes exceeds max_file_size"],
                )
            source = path.read_text(encoding=file_settings.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read {path}: {e}")
            return ConversionResult(success=False, file_path=str(path), errors=[str(e)])

        root = Path(source_root) if source_root is not None else None
        return self.convert_source(
            source,
            class_name or path.stem,
            fully_qualified_name_for(path, root),
            file_path=str(path),
        )

    def collect_entries(self, paths: Iterable[Union[str, Path]]) -> List[Tuple[Path, Path]]:
        """
        Expand directories into the JavaScript files the configuration selects.

        Returns (file, base) pairs, where base is the directory argument the
        file was found under, or the parent of a file given directly.
        """
        file_settings = self.config.file_settings
        entries: List[Tuple[Path, Path]] = []

        for entry in paths:
            entry = Path(entry)
            if entry.is_file():
                entries.append((entry, entry.parent))
                continue
            if not entry.is_dir():
                logger.warning(f"Path does not exist: {entry}")
                continue
            for candidate in sorted(entry.rglob("*")):
                if not candidate.is_file():
                    continue
                relative = candidate.relative_to(entry).as_posix()
                if not _matches(relative, file_settings.include_patterns):
                    continue
                if _matches(relative, file_settings.exclude_patterns):
                    continue
                entries.append((candidate, entry))

        return entries

    def collect_files(self, paths: Iterable[Union[str, Path]]) -> List[Path]:
        return [path for path, _ in self.collect_entries(paths)]

    def output_path_for(self, path: Path, base: Optional[Path]) -> Path:
        """Mirror `path` under the output directory, relative to `base`."""
        output_directory = self.config.output_settings.output_directory
        if not output_directory:
            return path
        if base is not None:
            try:
                return Path(output_directory) / path.resolve().relative_to(base.resolve())
            except ValueError:
                pass
        return Path(output_directory) / path.name

    def convert_paths(
        self,
        paths: Iterable[Union[str, Path]],
        source_root: Optional[Union[str, Path]] = None,
        class_name: Optional[str] = None,
        write: bool = True,
    ) -> List[ConversionResult]:
        """
        Convert every selected file and write the successful ones.

        A file that fails to convert does not stop the run, and neither does
        a file whose output path was already claimed by an earlier file. Writes
        happen in one atomic session; if any write fails all of them are
        rolled back and the error is raised.
        """
        root = Path(source_root) if source_root is not None else None
        entries = self.collect_entries(paths)
        results = [self.convert_file(path, root, class_name) for path, _ in entries]

        if not write:
            return results

        output_settings = self.config.output_settings
        executor = ConversionExecutor(
            backup_enabled=output_settings.backup_enabled,
            dry_run=output_settings.dry_run,
        )
        claimed: Dict[Path, str] = {}
        with executor.atomic_write_session():
            for result, (path, base) in zip(results, entries):
                if not result.success or result.output is None:
                    continue
                target = self.output_path_for(path, root or base)
                if not result.changed and target == path:
                    continue
                key = target.resolve()
                if key in claimed:
                    logger.error(f"{path} and {claimed[key]} both map to {target}")
                    result.success = False
                    result.errors.append(f"Output path {target} already written by {claimed[key]}")
                    continue
                claimed[key] = str(path)
                written = executor.write_validated(
                    target, result.output, encoding=self.config.file_settings.encoding
                )
                result.metadata["output_path"] = str(target)
                result.metadata["written"] = written

        logger.info(
            f"Converted {sum(1 for r in results if r.success)} of {len(results)} files, "
            f"wrote {len(executor.written)}"
        )
        return results
