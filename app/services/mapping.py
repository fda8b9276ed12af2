# app/services/mapping.py
# Fixed index mapping for location documents
EMBEDDING_DIMS = 128

LOCATIONS_MAPPING: dict = {
    "settings": {"number_of_shards": 1, "number_of_replicas": 0},
    "mappings": {
        "properties": {
            "id": {"type": "keyword"},
            "name": {"type": "text"},
            "address": {"type": "text"},
            "description": {"type": "text"},
            "coordinates": {"type": "geo_point"},
            "region": {"type": "keyword"},
            "city": {"type": "keyword"},
            "business_types_suitable": {"type": "keyword"},
            "traffic_score": {"type": "float"},
            "competition_density": {"type": "float"},
            "demographics": {
                "type": "object",
                "properties": {
                    "age_group": {"type": "keyword"},
                    "average_income": {"type": "float"},
                    "interests": {"type": "keyword"},
                    "population_density": {"type": "float"},
                },
            },
            "embedding": {"type": "dense_vector", "dims": EMBEDDING_DIMS},
            "created_at": {"type": "date"},
            "updated_at": {"type": "date"},
        }
    },
}
