"""
GraphQL query documents used by the stores.

Each list query takes `$pagination: PaginationInput` and, where the API
supports it, a typed `$filter`, and returns the paginated envelope
`{items, total, page, limit, hasMore}`.

The root field name of every document is what the gateway reads back out of
`data` (see supplier_portal.graphql.operation).
"""

USER_FIELDS = """
      id
      email
      firstName
      lastName
      role
      department
      isActive
      lastLogin
      createdAt
      updatedAt
"""

CURRENT_USER_QUERY = """
  query CurrentUser {
    currentUser {%s}
  }
""" % USER_FIELDS

GET_USER_QUERY = """
  query GetUser($id: ID!) {
    user(id: $id) {%s}
  }
""" % USER_FIELDS

GET_USERS_QUERY = """
  query GetUsers($pagination: PaginationInput, $search: String) {
    users(pagination: $pagination, search: $search) {
      items {%s}
      total
      page
      limit
      hasMore
    }
  }
""" % USER_FIELDS

GET_ROLE_PERMISSIONS_MAP_QUERY = """
  query GetRolePermissionsMap($role: UserRole!) {
    rolePermissionsMap(role: $role)
  }
"""

GET_SUPPLIER_QUERY = """
  query GetSupplier($id: ID!) {
    supplier(id: $id) {
      id
      name
      legalName
      taxId
      registrationNumber
      address
      city
      state
      country
      postalCode
      phoneNumber
      email
      website
      status
      notes
      financialStability
      qualityRating
      deliveryRating
      communicationRating
      overallRating
      contactPersonName
      contactPersonEmail
      contactPersonPhone
      categories { id name }
      createdBy { id firstName lastName }
      updatedBy { id firstName lastName }
      approvedBy { id firstName lastName }
      approvedAt
      createdAt
      updatedAt
    }
  }
"""

GET_SUPPLIERS_QUERY = """
  query GetSuppliers($pagination: PaginationInput, $filter: SupplierFilterInput) {
    suppliers(pagination: $pagination, filter: $filter) {
      items {
        id
        name
        legalName
        taxId
        email
        phoneNumber
        country
        city
        status
        overallRating
        categories { id name }
        createdAt
        updatedAt
      }
      total
      page
      limit
      hasMore
    }
  }
"""

SUPPLIER_CATEGORY_FIELDS = """
      id
      name
      description
      createdAt
      updatedAt
"""

GET_SUPPLIER_CATEGORY_QUERY = """
  query GetSupplierCategory($id: ID!) {
    supplierCategory(id: $id) {%s}
  }
""" % SUPPLIER_CATEGORY_FIELDS

GET_SUPPLIER_CATEGORIES_QUERY = """
  query GetSupplierCategories($pagination: PaginationInput, $search: String) {
    supplierCategories(pagination: $pagination, search: $search) {
      items {%s}
      total
      page
      limit
      hasMore
    }
  }
""" % SUPPLIER_CATEGORY_FIELDS

GET_CONTRACT_QUERY = """
  query GetContract($id: ID!) {
    contract(id: $id) {
      id
      title
      supplier { id name }
      contractNumber
      description
      startDate
      endDate
      value
      currency
      status
      terms
      paymentTerms
      deliveryTerms
      createdBy { id firstName lastName }
      approvedBy { id firstName lastName }
      approvedAt
      createdAt
      updatedAt
      documents { id name fileName }
      daysRemaining
    }
  }
"""

GET_CONTRACTS_QUERY = """
  query GetContracts($pagination: PaginationInput, $filter: ContractFilterInput) {
    contracts(pagination: $pagination, filter: $filter) {
      items {
        id
        title
        supplier { id name }
        contractNumber
        startDate
        endDate
        value
        currency
        status
        createdAt
        updatedAt
        daysRemaining
      }
      total
      page
      limit
      hasMore
    }
  }
"""

GET_EXPIRING_CONTRACTS_QUERY = """
  query GetExpiringContracts($daysThreshold: Int, $pagination: PaginationInput) {
    expiringContracts(daysThreshold: $daysThreshold, pagination: $pagination) {
      items {
        id
        title
        supplier { id name }
        contractNumber
        startDate
        endDate
        value
        currency
        status
        daysRemaining
      }
      total
      page
      limit
      hasMore
    }
  }
"""

GET_CONTRACT_EXPIRATION_SUMMARY_QUERY = """
  query GetContractExpirationSummary {
    contractExpirationSummary {
      expiringSoon
      expiringLater
      expired
      highValueContract {
        id
        title
        value
        currency
        endDate
        supplier { id name }
      }
    }
  }
"""

GET_CONTRACTS_BY_STATUS_QUERY = """
  query GetContractsByStatus {
    contractsByStatus {
      status
      count
      value
    }
  }
"""

GET_PAYMENT_QUERY = """
  query GetPayment($id: ID!) {
    payment(id: $id) {
      id
      supplier { id name }
      contract { id title contractNumber }
      amount
      currency
      description
      invoiceNumber
      invoiceDate
      dueDate
      paymentDate
      status
      notes
      requestedBy { id firstName lastName }
      approvedBy { id firstName lastName }
      approvedAt
      createdAt
      updatedAt
      documents { id name fileName }
    }
  }
"""

GET_PAYMENTS_QUERY = """
  query GetPayments($pagination: PaginationInput, $filter: PaymentFilterInput) {
    payments(pagination: $pagination, filter: $filter) {
      items {
        id
        supplier { id name }
        contract { id title contractNumber }
        amount
        currency
        invoiceNumber
        dueDate
        paymentDate
        status
        createdAt
        updatedAt
      }
      total
      page
      limit
      hasMore
    }
  }
"""

GET_DOCUMENT_QUERY = """
  query GetDocument($id: ID!) {
    document(id: $id) {
      id
      name
      fileName
      fileType
      fileSize
      filePath
      description
      supplier { id name }
      contract { id title }
      payment { id invoiceNumber }
      uploadedBy { id firstName lastName }
      createdAt
      updatedAt
    }
  }
"""

GET_DOCUMENTS_QUERY = """
  query GetDocuments($pagination: PaginationInput, $supplierId: ID, $contractId: ID, $paymentId: ID) {
    documents(
      pagination: $pagination,
      supplierId: $supplierId,
      contractId: $contractId,
      paymentId: $paymentId
    ) {
      items {
        id
        name
        fileName
        fileType
        fileSize
        filePath
        description
        createdAt
        updatedAt
      }
      total
      page
      limit
      hasMore
    }
  }
"""

GET_AUDIT_LOG_QUERY = """
  query GetAuditLog($id: ID!) {
    auditLog(id: $id) {
      id
      user { id firstName lastName email }
      action
      entityType
      entityId
      oldValues
      newValues
      ipAddress
      userAgent
      createdAt
    }
  }
"""

GET_AUDIT_LOGS_QUERY = """
  query GetAuditLogs($pagination: PaginationInput, $filter: AuditLogFilterInput) {
    auditLogs(pagination: $pagination, filter: $filter) {
      items {
        id
        user { id firstName lastName email }
        action
        entityType
        entityId
        oldValues
        newValues
        ipAddress
        userAgent
        createdAt
      }
      total
      page
      limit
      hasMore
    }
  }
"""

# Dashboard analytics (aggregates computed by the API)
GET_ANALYTICS_SUMMARY_QUERY = """
  query GetAnalyticsSummary {
    analyticsSummary {
      totalSuppliers
      pendingSuppliers
      approvedSuppliers
      rejectedSuppliers
      totalContracts
      activeContracts
      expiringContracts
      totalPaymentsAmount
      pendingPaymentsAmount
    }
  }
"""

GET_SUPPLIERS_BY_COUNTRY_QUERY = """
  query GetSuppliersByCountry {
    suppliersByCountry {
      country
      count
    }
  }
"""

GET_SUPPLIERS_BY_CATEGORY_QUERY = """
  query GetSuppliersByCategory {
    suppliersByCategory {
      category
      count
    }
  }
"""

GET_PAYMENTS_BY_MONTH_QUERY = """
  query GetPaymentsByMonth($months: Int!) {
    paymentsByMonth(months: $months) {
      month
      amount
    }
  }
"""

PING_QUERY = """
  query Ping {
    __typename
  }
"""
