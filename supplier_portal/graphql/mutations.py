"""GraphQL mutation documents used by the stores."""

LOGIN_MUTATION = """
  mutation Login($input: LoginInput!) {
    login(input: $input) {
      token
      user {
        id
        email
        firstName
        lastName
        role
        department
      }
    }
  }
"""

CREATE_USER_MUTATION = """
  mutation CreateUser($input: UserInput!) {
    createUser(input: $input) {
      id
      email
      firstName
      lastName
      role
      department
      isActive
      createdAt
      updatedAt
    }
  }
"""

UPDATE_USER_MUTATION = """
  mutation UpdateUser($id: ID!, $input: UserUpdateInput!) {
    updateUser(id: $id, input: $input) {
      id
      email
      firstName
      lastName
      role
      department
      isActive
      lastLogin
      updatedAt
    }
  }
"""

DELETE_USER_MUTATION = """
  mutation DeleteUser($id: ID!) {
    deleteUser(id: $id)
  }
"""

CHANGE_USER_ROLE_MUTATION = """
  mutation ChangeUserRole($userId: ID!, $newRole: String!) {
    changeUserRole(userId: $userId, newRole: $newRole) {
      id
      role
      updatedAt
    }
  }
"""

TOGGLE_USER_STATUS_MUTATION = """
  mutation ToggleUserStatus($userId: ID!, $isActive: Boolean!) {
    toggleUserStatus(userId: $userId, isActive: $isActive) {
      id
      isActive
      updatedAt
    }
  }
"""

SUPPLIER_MUTATION_FIELDS = """
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
      updatedAt
"""

CREATE_SUPPLIER_MUTATION = """
  mutation CreateSupplier($input: SupplierInput!) {
    createSupplier(input: $input) {%s      createdAt
    }
  }
""" % SUPPLIER_MUTATION_FIELDS

UPDATE_SUPPLIER_MUTATION = """
  mutation UpdateSupplier($id: ID!, $input: SupplierUpdateInput!) {
    updateSupplier(id: $id, input: $input) {%s}
  }
""" % SUPPLIER_MUTATION_FIELDS

DELETE_SUPPLIER_MUTATION = """
  mutation DeleteSupplier($id: ID!) {
    deleteSupplier(id: $id)
  }
"""

APPROVE_SUPPLIER_MUTATION = """
  mutation ApproveSupplier($id: ID!) {
    approveSupplier(id: $id) {
      id
      status
      approvedBy { id firstName lastName }
      approvedAt
      updatedAt
    }
  }
"""

REJECT_SUPPLIER_MUTATION = """
  mutation RejectSupplier($id: ID!, $reason: String!) {
    rejectSupplier(id: $id, reason: $reason) {
      id
      status
      notes
      updatedAt
    }
  }
"""

RATE_SUPPLIER_MUTATION = """
  mutation RateSupplier($input: SupplierRatingInput!) {
    rateSupplier(input: $input) {
      id
      financialStability
      qualityRating
      deliveryRating
      communicationRating
      overallRating
      updatedAt
    }
  }
"""

CONTRACT_MUTATION_FIELDS = """
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
      updatedAt
"""

CREATE_CONTRACT_MUTATION = """
  mutation CreateContract($input: ContractInput!) {
    createContract(input: $input) {%s      createdAt
    }
  }
""" % CONTRACT_MUTATION_FIELDS

UPDATE_CONTRACT_MUTATION = """
  mutation UpdateContract($id: ID!, $input: ContractUpdateInput!) {
    updateContract(id: $id, input: $input) {%s}
  }
""" % CONTRACT_MUTATION_FIELDS

DELETE_CONTRACT_MUTATION = """
  mutation DeleteContract($id: ID!) {
    deleteContract(id: $id)
  }
"""

APPROVE_CONTRACT_MUTATION = """
  mutation ApproveContract($id: ID!) {
    approveContract(id: $id) {
      id
      status
      approvedBy { id firstName lastName }
      approvedAt
      updatedAt
    }
  }
"""

REJECT_CONTRACT_MUTATION = """
  mutation RejectContract($id: ID!, $reason: String!) {
    rejectContract(id: $id, reason: $reason) {
      id
      status
      updatedAt
    }
  }
"""

PAYMENT_MUTATION_FIELDS = """
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
      updatedAt
"""

CREATE_PAYMENT_MUTATION = """
  mutation CreatePayment($input: PaymentInput!) {
    createPayment(input: $input) {%s      createdAt
    }
  }
""" % PAYMENT_MUTATION_FIELDS

UPDATE_PAYMENT_MUTATION = """
  mutation UpdatePayment($id: ID!, $input: PaymentUpdateInput!) {
    updatePayment(id: $id, input: $input) {%s}
  }
""" % PAYMENT_MUTATION_FIELDS

DELETE_PAYMENT_MUTATION = """
  mutation DeletePayment($id: ID!) {
    deletePayment(id: $id)
  }
"""

APPROVE_PAYMENT_MUTATION = """
  mutation ApprovePayment($id: ID!) {
    approvePayment(id: $id) {
      id
      status
      approvedBy { id firstName lastName }
      approvedAt
      updatedAt
    }
  }
"""

REJECT_PAYMENT_MUTATION = """
  mutation RejectPayment($id: ID!, $reason: String!) {
    rejectPayment(id: $id, reason: $reason) {
      id
      status
      notes
      updatedAt
    }
  }
"""

SUPPLIER_CATEGORY_MUTATION_FIELDS = """
      id
      name
      description
      updatedAt
"""

CREATE_SUPPLIER_CATEGORY_MUTATION = """
  mutation CreateSupplierCategory($input: SupplierCategoryInput!) {
    createSupplierCategory(input: $input) {%s      createdAt
    }
  }
""" % SUPPLIER_CATEGORY_MUTATION_FIELDS

UPDATE_SUPPLIER_CATEGORY_MUTATION = """
  mutation UpdateSupplierCategory($id: ID!, $input: SupplierCategoryInput!) {
    updateSupplierCategory(id: $id, input: $input) {%s}
  }
""" % SUPPLIER_CATEGORY_MUTATION_FIELDS

DELETE_SUPPLIER_CATEGORY_MUTATION = """
  mutation DeleteSupplierCategory($id: ID!) {
    deleteSupplierCategory(id: $id)
  }
"""

UPLOAD_DOCUMENT_MUTATION = """
  mutation UploadDocument($input: DocumentInput!) {
    uploadDocument(input: $input) {
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
  }
"""

DELETE_DOCUMENT_MUTATION = """
  mutation DeleteDocument($id: ID!) {
    deleteDocument(id: $id)
  }
"""
