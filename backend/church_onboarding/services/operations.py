"""GraphQL documents issued against the church-management API."""

CREATE_ORGANISATION = """
mutation CreateOrganisation($input: CreateOrganisationInput!) {
  createOrganisation(input: $input) {
    id
    name
    email
  }
}
"""

CREATE_SUPER_ADMIN_USER = """
mutation CreateSuperAdminUser(
  $email: String!
  $password: String!
  $firstName: String!
  $lastName: String!
  $organisationId: String!
) {
  createSuperAdminUser(
    email: $email
    password: $password
    firstName: $firstName
    lastName: $lastName
    organisationId: $organisationId
  ) {
    id
    email
  }
}
"""

REMOVE_ORGANISATION = """
mutation RemoveOrganisation($id: ID!) {
  removeOrganisation(id: $id)
}
"""

CREATE_ORGANIZATION_SUBSCRIPTION = """
mutation CreateOrganizationSubscription(
  $organizationId: ID!
  $planId: ID!
  $input: CreateOrganizationSubscriptionInput!
) {
  createOrganizationSubscription(
    organizationId: $organizationId
    planId: $planId
    input: $input
  ) {
    id
    status
    currentPeriodStart
    currentPeriodEnd
    trialStart
    trialEnd
    nextBillingDate
    plan {
      id
      name
      amount
      currency
      interval
    }
    organisation {
      id
      name
    }
    createdAt
  }
}
"""

GET_SUBSCRIPTION_PLANS = """
query GetSubscriptionPlans($filter: PlanFilterInput) {
  subscriptionPlans(filter: $filter) {
    id
    name
    description
    amount
    currency
    interval
    isActive
    features
    trialPeriodDays
  }
}
"""
