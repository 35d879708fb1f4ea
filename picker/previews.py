"""Write PR bodies to per-record files for the selector's preview pane.

Each file path doubles as the key that maps a selected line back to its
record, so names must be unique per (repository, number).
"""

import logging
from pathlib import Path
from typing import Iterable
from urllib.parse import quote

from models.data_models import MaterializedPR, PullRequestRecord
from utils.errors import ArtifactWriteError

logger = logging.getLogger(__name__)


def artifact_name(repository_name: str, number: int) -> str:
    """
    Build the preview filename for a record.
    
    The repository name is percent-encoded with no safe characters, so "/"
    becomes "%2F" and a literal "%" becomes "%25". Encoding is injective
    and the number after the last "_" is all digits, so distinct
    (repository, number) pairs never share a name.
    
    Examples:
        ("a/b", 5)   -> "a%2Fb_5.md"
        ("a_b/c", 5) -> "a_b%2Fc_5.md"
    """
    return f"{quote(repository_name, safe='')}_{number}.md"


class PreviewMaterializer:
    """Materialize record bodies into one directory.
    
    The directory belongs to the caller (a per-invocation temporary
    directory) and is removed by it.
    """
    
    def __init__(self, directory: Path):
        self.directory = Path(directory)
    
    def materialize(self, records: Iterable[PullRequestRecord]) -> list[MaterializedPR]:
        """
        Write each record's body and pair it with the artifact path.
        
        Args:
            records: Ranked records; output keeps the same order
        
        Returns:
            List of MaterializedPR
        
        Raises:
            ArtifactWriteError: On any filesystem failure or a duplicate key
        """
        entries: list[MaterializedPR] = []
        seen: set[Path] = set()
        
        for record in records:
            path = (self.directory / artifact_name(record.repository_name, record.number)).resolve()
            if path in seen:
                raise ArtifactWriteError(
                    f"Duplicate pull request {record.repository_name}#{record.number} in results"
                )
            seen.add(path)
            
            try:
                path.write_text(record.body or "", encoding="utf-8")
            except OSError as e:
                raise ArtifactWriteError(f"Failed to write preview {path}: {e}") from e
            
            entries.append(MaterializedPR(record=record, artifact_path=path))
        
        logger.debug(f"Wrote {len(entries)} preview files to {self.directory}")
        return entries
