"""Distance d'édition (Levenshtein) et score de similarité normalisé."""

from __future__ import annotations


def edit_distance(a: str, b: str) -> int:
    """
    Nombre minimal d'insertions, suppressions ou substitutions d'un caractère
    pour transformer `a` en `b`.

    Table de programmation dynamique de taille (len(b)+1) x (len(a)+1).
    Aucune normalisation (casse, espaces) n'est appliquée ici.
    """
    m = len(a)
    n = len(b)
    table = [[0] * (m + 1) for _ in range(n + 1)]

    for i in range(n + 1):
        table[i][0] = i
    for j in range(m + 1):
        table[0][j] = j

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            if b[i - 1] == a[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],  # substitution
                    table[i][j - 1],  # insertion
                    table[i - 1][j],  # suppression
                )

    return table[n][m]


def similarity(a: str, b: str) -> float:
    """
    Similarité dans [0, 1] (1.0 = identiques), normalisée par la longueur
    de la chaîne la plus longue.

    Deux chaînes vides sont identiques.
    """
    if len(a) > len(b):
        longer, shorter = a, b
    else:
        longer, shorter = b, a

    if len(longer) == 0:
        return 1.0

    return (len(longer) - edit_distance(longer, shorter)) / len(longer)
