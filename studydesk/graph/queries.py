"""GraphQL documents understood by the folder/document service."""

GET_FOLDER_CONTENTS = """
query GetFolderContents($ids: [String]!, $subfolderLimit: Int) {
  foldersById(ids: $ids) {
    edges {
      node {
        id
        name
        documents {
          edges {
            node {
              id
              textContent
              createdAt
              description
            }
          }
        }
        subfolders(after: null, first: $subfolderLimit) {
          edges {
            node {
              id
              name
              documentCount
            }
          }
        }
      }
    }
  }
}
"""

CREATE_FOLDER = """
mutation CreateFolder($input: CreateFolderInputType!) {
  createFolder(input: $input) {
    id
    name
  }
}
"""

UPDATE_FOLDER_NAME = """
mutation UpdateSubfolder($id: String!, $name: String!) {
  updateFolder(input: { id: $id, name: $name }) {
    success
    folder {
      id
      name
    }
  }
}
"""

DELETE_FOLDER = """
mutation RemoveSubfolder($id: String!) {
  removeFolder(id: $id) {
    success
  }
}
"""

CREATE_DOCUMENT = """
mutation CreateDocument($folderId: String!, $textContent: String!, $description: String) {
  createDocumentText(folderId: $folderId, textContent: $textContent, description: $description) {
    id
    textContent
    description
    createdAt
  }
}
"""

UPDATE_DOCUMENT = """
mutation UpdateDocument($id: String!, $textContent: String!) {
  updateTextContentOnDocument(id: $id, textContent: $textContent) {
    id
    textContent
    description
  }
}
"""

DELETE_DOCUMENT = """
mutation DeleteDocument($input: RemoveInputType!) {
  removeDocument(input: $input) {
    success
  }
}
"""
