from typing import List

from . import Service, decode, query_key
from .assets import asset_details_key
from .work_orders import work_order_details_key
from ..models import Document, EntityType, match_enum

DOCUMENTS = '/api/documents'


def documents_key(entity_type, entity_id):
    entity_type = match_enum(EntityType, entity_type)
    return query_key(DOCUMENTS, entity_type.value, entity_id)


def owner_keys(entity_type, entity_id):
    """The owner's document list and its detail view."""
    entity_type = match_enum(EntityType, entity_type)
    keys = [documents_key(entity_type, entity_id)]
    if entity_type is EntityType.ASSET:
        keys.append(asset_details_key(entity_id))
    else:
        keys.append(work_order_details_key(entity_id))
    return keys


class DocumentService(Service):

    def list_documents(self, entity_type, entity_id):
        return self.query(documents_key(entity_type, entity_id), List[Document])

    def find(self, document_id, entity_type, entity_id):
        return next((d for d in self.list_documents(entity_type, entity_id)
                     if d.id == document_id), None)

    def upload(self, entity_type, entity_id, file_storage, title=None, description=None):
        entity_type = match_enum(EntityType, entity_type)
        data = {k: v for k, v in (('title', title), ('description', description)) if v}

        def call():
            return decode(Document, self.api.upload(
                f'{DOCUMENTS}/{entity_type.value}/{entity_id}/upload', file_storage, data=data))

        return self.mutation(call, invalidates=owner_keys(entity_type, entity_id)).run()

    def download(self, document_id):
        """Binary passthrough: (content, filename, content_type)."""
        return self.api.download(f'{DOCUMENTS}/{document_id}/download')

    def delete(self, document, confirmed=False):
        if not confirmed:
            raise ValueError('Deleting a document must be confirmed')

        def call():
            return self.api.delete(f'{DOCUMENTS}/{document.id}')

        return self.mutation(
            call, invalidates=owner_keys(document.entity_type, document.entity_id)).run()
