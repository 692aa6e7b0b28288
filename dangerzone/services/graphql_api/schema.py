"""GraphQL schema for the hazard registry.

Enum values are exposed as their lowercase names, which are also the string
values of the Python enums, so resolvers exchange plain strings.
"""
from ariadne import gql, make_executable_schema
from graphql import GraphQLSchema

from .resolvers import mutation, query

type_defs = gql("""
    "Risk level of a hazard - drives safety protocols"
    enum RiskLevel {
        extreme
        high
        moderate
        low
    }

    "Hazard category - determines protective equipment"
    enum DangerCategory {
        chemical
        electrical
        mechanical
        biological
        radiation
    }

    "Lifecycle status of a hazard"
    enum DangerStatus {
        active
        contained
        mitigated
        eliminated
    }

    "A tracked hazard"
    type Danger {
        id: ID!
        title: String!
        description: String
        riskLevel: RiskLevel!
        category: DangerCategory!
        "Exact location - STRICTLY CONTROLLED"
        location: String!
        "Severity rating (1-10)"
        consequenceRating: Int!
        dateReported: String!
        lastInspection: String!
        reportedBy: String!
        status: DangerStatus!
        protectiveEquipment: [String]
        containmentProcedures: [String]
    }

    type RiskLevelCount {
        riskLevel: RiskLevel!
        count: Int!
    }

    type CategoryCount {
        category: DangerCategory!
        count: Int!
    }

    "Registry statistics"
    type DangerStats {
        totalCount: Int!
        byRiskLevel: [RiskLevelCount!]!
        byCategory: [CategoryCount!]!
        "Extreme and high hazards - require immediate attention"
        criticalLevels: Int!
    }

    "Security audit log entry"
    type SecurityLog {
        timestamp: String!
        operation: String!
        dangerId: ID
        details: String!
        operatorLevel: Int!
    }

    type Query {
        "All hazards; optional filters are combined with AND"
        dangers(riskLevel: RiskLevel, category: DangerCategory, minRating: Int): [Danger!]!
        danger(id: ID!): Danger
        dangersByRiskLevel(level: RiskLevel!): [Danger!]!
        dangersByCategory(category: DangerCategory!): [Danger!]!
        "Requires clearance 2"
        dangerStats: DangerStats!
        "Requires clearance 5"
        securityLogs(limit: Int): [SecurityLog!]!
    }

    type Mutation {
        createDanger(
            title: String!
            description: String
            riskLevel: RiskLevel!
            category: DangerCategory!
            location: String!
            consequenceRating: Int!
            protectiveEquipment: [String!]
            containmentProcedures: [String!]
        ): Danger!
        "Requires clearance 4 (5 for extreme hazards)"
        deleteDanger(id: ID!): Boolean!
        "Requires clearance 3"
        updateDangerStatus(id: ID!, status: DangerStatus!): Danger!
        "Requires clearance 2"
        recordInspection(id: ID!): Danger!
    }
""")


def build_schema() -> GraphQLSchema:
    return make_executable_schema(type_defs, query, mutation)


schema = build_schema()
