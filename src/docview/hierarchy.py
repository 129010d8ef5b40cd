from __future__ import annotations

from typing import List

from .ranges import RangeIndex


class HierarchyResolver:
    """Resolves token -> entity -> sentence containment over range indices."""

    def __init__(
        self,
        entities: RangeIndex,
        custom_entities: RangeIndex,
        sentences: RangeIndex,
    ) -> None:
        self.entities = entities
        self.custom_entities = custom_entities
        self.sentences = sentences

    def entity_of_token(self, token_index: int) -> int | None:
        return self.entities.parent_of(token_index)

    def custom_entity_of_token(self, token_index: int) -> int | None:
        return self.custom_entities.parent_of(token_index)

    def sentence_of_token(self, token_index: int) -> int | None:
        return self.sentences.parent_of(token_index)

    def sentence_of_entity(self, entity_index: int) -> int | None:
        return self.sentences.parent_of(self.entities[entity_index].start)

    def sentence_of_custom_entity(self, entity_index: int) -> int | None:
        return self.sentences.parent_of(self.custom_entities[entity_index].start)

    def entities_in_sentence(self, sentence_index: int) -> List[int]:
        sentence = self.sentences[sentence_index]
        return self.entities.contained_within(sentence.start, sentence.end)

    def custom_entities_in_sentence(self, sentence_index: int) -> List[int]:
        sentence = self.sentences[sentence_index]
        return self.custom_entities.contained_within(sentence.start, sentence.end)
