from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict


def _is_var_char(ch: str) -> bool:
    return "A" <= ch <= "Z"


@dataclass
class Environment:
    """Variable bindings captured during a session.

    Lookups never fail: an unbound name resolves to itself, so a template
    such as ``"Hello $NAME"`` renders as ``"Hello NAME"`` until NAME is set.
    """
    variables: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        return self.variables.get(name, name)

    def set(self, name: str, value: str) -> None:
        self.variables[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self.variables

    def resolve_template(self, template: str) -> str:
        """Substitute ``$NAME`` tokens in a single left-to-right pass.

        A token is the longest run of ``A``-``Z`` after the ``$``. A ``$``
        not followed by an uppercase letter is kept as-is. Substituted
        values are not scanned again.
        """
        if "$" not in template:
            return template
        out = []
        i = 0
        end = len(template)
        while i < end:
            ch = template[i]
            if ch != "$":
                out.append(ch)
                i += 1
                continue
            j = i + 1
            while j < end and _is_var_char(template[j]):
                j += 1
            if j == i + 1:
                out.append("$")
            else:
                out.append(self.get(template[i + 1:j]))
            i = j
        return "".join(out)
