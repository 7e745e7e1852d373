from canopy.generation.grammar import (RULE_SETS, GrammarRuleSet,  # noqa: F401
                                       UnknownRuleSetError, expand)
from canopy.generation.parameters import (GenerationParameters,  # noqa: F401
                                          map_score)
from canopy.generation.pipeline import GeneratedTree, generate  # noqa: F401
from canopy.generation.turtle import (Branch, JitterBands,  # noqa: F401
                                      LeafKind, LeafSite, interpret,
                                      scatter_leaves)
