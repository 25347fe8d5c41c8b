"""Assemble the record rule trees for a resolved CSV schema.

The trees are built once per session after the column-definition row is
resolved, then pruned to the session's schema version. Wide files get one
copy of every payer-specific rule per discovered payer/plan pair.
"""

from __future__ import annotations

import logging

from hptcheck.resolver.models import ResolvedSchema
from hptcheck.rules.conditions import (
    BOUND_FIELDS,
    DRUG_FIELDS,
    CodePairMissing,
    DollarNeedsMinMax,
    DrugInformationForNdc,
    ItemRequiresCharge,
    ModifierMinimumInfo,
    NineNinesEstimate,
    OtherMethodologyNotes,
    PercentageAlgorithmEstimate,
)
from hptcheck.rules.fields import (
    AnyCodePresent,
    ColumnIndex,
    ModifierPresent,
    NoCodePresent,
    OptionalPositiveNumber,
    PayerPlanColumns,
    RequiredEnumField,
    RequiredField,
    RequiredPositiveNumber,
    code_fields,
    present,
)
from hptcheck.rules.policy import EnforcementPolicy
from hptcheck.rules.tree import Branch, Leaf, RuleNode, filter_on_version
from hptcheck.schema.tables import (
    BILLING_CODE_TYPES,
    DRUG_UNITS,
    SETTINGS,
    STANDARD_CHARGE_METHODOLOGY,
)
from hptcheck.schema.versions import ALLOWED_VERSIONS, is_allowed_version

logger = logging.getLogger(__name__)

PAYER_SPECIFIC_SUFFIX = (
    " when a payer specific negotiated charge is encoded as a dollar amount, "
    "percentage, or algorithm"
)

GENERAL_CHARGES = ("standard_charge | gross", "standard_charge | discounted_cash")


def _charge_groups(schema: ResolvedSchema) -> list[PayerPlanColumns]:
    if schema.is_tall:
        return [PayerPlanColumns.tall()]
    return [PayerPlanColumns.wide(pair) for pair in schema.payer_plans]


def _check_version(version: str) -> None:
    if not is_allowed_version(version):
        raise ValueError(
            f"Unsupported schema version {version!r}; expected one of {ALLOWED_VERSIONS}"
        )


def _payer_charge_checks(
    columns: ColumnIndex, schema: ResolvedSchema, groups: list[PayerPlanColumns],
) -> list[RuleNode]:
    methodology = tuple(STANDARD_CHARGE_METHODOLOGY)
    if schema.is_tall:
        group = groups[0]
        return [
            Branch(
                name="conditional for payer specific negotiated charge",
                predicate=present(*group.charges),
                children=(
                    Leaf("payer_name", RequiredField(columns, "payer_name", PAYER_SPECIFIC_SUFFIX), ">=2.1.0"),
                    Leaf("plan_name", RequiredField(columns, "plan_name", PAYER_SPECIFIC_SUFFIX), ">=2.1.0"),
                    Leaf(
                        group.methodology,
                        RequiredEnumField(columns, group.methodology, methodology, PAYER_SPECIFIC_SUFFIX),
                        ">=2.1.0",
                    ),
                ),
                applies=">=2.1.0",
            )
        ]
    return [
        Branch(
            name=f"conditional for {group.pair} negotiated charge methodology",
            predicate=present(*group.charges),
            validator=RequiredEnumField(
                columns, group.methodology, methodology, PAYER_SPECIFIC_SUFFIX
            ),
            applies=">=2.1.0",
        )
        for group in groups
    ]


def _non_modifier_checks(
    columns: ColumnIndex,
    schema: ResolvedSchema,
    groups: list[PayerPlanColumns],
    policy: EnforcementPolicy,
) -> tuple[RuleNode, ...]:
    """Rules for records that describe an item or service."""
    nodes = _payer_charge_checks(columns, schema, groups)

    nodes.extend(
        Leaf(f"{group.notes} required for other methodology", OtherMethodologyNotes(columns, group), ">=2.1.0")
        for group in groups
    )

    charge_fields = list(GENERAL_CHARGES)
    for group in groups:
        charge_fields.extend(group.charges)
        if not schema.is_tall:
            charge_fields.extend((group.methodology, group.estimate, group.notes))
    nodes.append(
        Leaf("item requires charge", ItemRequiresCharge(columns, tuple(charge_fields)), ">=2.1.0")
    )

    nodes.append(
        Leaf(
            "dollar requires min and max",
            DollarNeedsMinMax(columns, tuple(group.dollar for group in groups)),
            ">=2.1.0",
        )
    )

    severity = policy.severity_for("estimated_amount")
    nodes.extend(
        Leaf(
            f"{group.estimate} required when charge is only percentage or algorithm",
            PercentageAlgorithmEstimate(columns, group, severity),
            ">=2.2.0",
        )
        for group in groups
    )
    return tuple(nodes)


def build_tree(
    schema: ResolvedSchema, version: str, policy: EnforcementPolicy,
) -> list[RuleNode]:
    """Build the error rules for every data record of a file."""
    _check_version(version)
    columns = ColumnIndex.from_schema(schema)
    groups = _charge_groups(schema)
    code_count = schema.code_column_count

    nodes: list[RuleNode] = [
        Leaf("description", RequiredField(columns, "description")),
        Leaf("setting", RequiredEnumField(columns, "setting", tuple(SETTINGS))),
    ]

    for code, code_type in code_fields(code_count):
        nodes.append(
            Branch(name=code, predicate=present(code_type), validator=RequiredField(columns, code))
        )
        nodes.append(
            Branch(
                name=code_type,
                predicate=present(code),
                validator=RequiredEnumField(columns, code_type, tuple(BILLING_CODE_TYPES)),
            )
        )

    for field in (*GENERAL_CHARGES, *BOUND_FIELDS):
        nodes.append(Leaf(field, OptionalPositiveNumber(columns, field)))

    for group in groups:
        nodes.append(Leaf(group.dollar, OptionalPositiveNumber(columns, group.dollar)))
        nodes.append(Leaf(group.percentage, OptionalPositiveNumber(columns, group.percentage)))
        nodes.append(Leaf(group.estimate, OptionalPositiveNumber(columns, group.estimate), "^2.2.0"))

    unit, drug_type = DRUG_FIELDS
    nodes.append(
        Branch(
            name=unit,
            predicate=present(*DRUG_FIELDS),
            validator=RequiredPositiveNumber(
                columns, unit, f' when "{drug_type}" is present'
            ),
            applies=">=2.2.0",
        )
    )
    nodes.append(
        Branch(
            name=drug_type,
            predicate=present(*DRUG_FIELDS),
            validator=RequiredEnumField(
                columns, drug_type, tuple(DRUG_UNITS), f' when "{unit}" is present'
            ),
            applies=">=2.2.0",
        )
    )
    nodes.append(
        Leaf(
            "NDC code requires drug information",
            DrugInformationForNdc(columns, code_count),
            ">=2.2.0",
        )
    )

    non_modifier = _non_modifier_checks(columns, schema, groups, policy)

    info_fields = ["additional_generic_notes"]
    for group in groups:
        info_fields.extend(group.charges)
        if not schema.is_tall:
            info_fields.append(group.notes)
    modifier_checks = (
        Leaf("extra info for modifier row", ModifierMinimumInfo(columns, tuple(info_fields)), ">=2.2.0"),
    )

    # 2.2.0 added modifier-only records, which carry no code pair
    is_modifier_present = Branch(
        name="is a modifier present",
        predicate=ModifierPresent(),
        children=modifier_checks,
        negative_validator=CodePairMissing(columns),
        negative_children=non_modifier,
        applies=">=2.2.0",
    )
    nodes.append(
        Branch(
            name="found at least one code",
            predicate=AnyCodePresent(code_count),
            children=non_modifier,
            negative_children=(is_modifier_present,),
            applies=">=2.2.0",
        )
    )
    nodes.append(
        Branch(
            name="code information required",
            predicate=NoCodePresent(code_count),
            validator=CodePairMissing(columns),
            children=non_modifier,
            negative_children=non_modifier,
            applies="<2.2.0",
        )
    )

    tree = filter_on_version(nodes, version)
    logger.debug("Built %d top-level record rules for version %s", len(tree), version)
    return tree


def build_alert_tree(schema: ResolvedSchema, version: str) -> list[RuleNode]:
    """Build the warning-only rules for every data record of a file."""
    _check_version(version)
    columns = ColumnIndex.from_schema(schema)
    nodes: list[RuleNode] = [
        Leaf(
            "discontinue encoding nine 9s for estimated amount",
            NineNinesEstimate(columns, group.estimate),
            ">=2.2.0",
        )
        for group in _charge_groups(schema)
    ]
    return filter_on_version(nodes, version)
