"""
Association of metadata instructions with parameters.

Metadata instructions follow the declaration they describe:

```
META      (program)
META      (program)
PARAM     (param 1)
META      (param 1)
META      (param 1)
PARAM     (param 2)
META      (param 2)
<end>
```

Entries seen before any parameter belong to the program; entries between
parameter K and parameter K+1 belong to parameter K.
"""

import dataclasses
from dataclasses import dataclass, field

from loguru import logger

from pixelbender.decoder.builder import ProgramBuilder
from pixelbender.decoder.errors import MetadataTargetError
from pixelbender.decoder.ir import MetadataEntry, NormalParameter


@dataclass
class MetadataAccumulator:
    """Pending metadata waiting for the next flush."""

    pending: list[MetadataEntry] = field(default_factory=list)

    def add(self, entry: MetadataEntry) -> None:
        self.pending.append(entry)

    def flush(self, builder: ProgramBuilder, offset: int | None = None) -> None:
        """Move pending entries onto the most recently declared parameter.

        With no parameter declared yet the entries become program metadata.

        Args:
            builder: Program under construction
            offset: Stream offset reported if the flush fails

        Raises:
            MetadataTargetError: If entries are pending and the last parameter
                is a texture
        """
        entries, self.pending = tuple(self.pending), []

        if not builder.parameters:
            logger.debug(f"Attaching {len(entries)} metadata entries to program")
            builder.metadata = list(entries)
            return

        target = builder.parameters[-1]
        if isinstance(target, NormalParameter):
            logger.debug(
                f"Attaching {len(entries)} metadata entries "
                f"to parameter {target.name!r}"
            )
            builder.parameters[-1] = dataclasses.replace(target, metadata=entries)
        elif entries:
            keys = ", ".join(entry.key for entry in entries)
            raise MetadataTargetError(
                f"Cannot attach metadata ({keys}) to texture parameter "
                f"{target.name!r}",
                offset,
            )
