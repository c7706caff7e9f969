"""
In-memory map structures.

The dataclasses mirror the Tiled JSON layout the optimizer reads and writes.
Keys the optimizer does not use are kept in `extra` and written back
untouched by `to_dict()`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from PIL import Image

# Keys handled explicitly, everything else goes to `extra`
_TILESET_KEYS = (
    "columns",
    "firstgid",
    "image",
    "imageheight",
    "imagewidth",
    "margin",
    "name",
    "properties",
    "spacing",
    "tilecount",
    "tileheight",
    "tilewidth",
    "tiles",
)


def _extra(data: Dict[str, Any], known) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key not in known}


@dataclass
class Frame:
    """One step of a tile animation"""

    tileid: int
    duration: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Frame":
        return cls(tileid=data["tileid"], duration=data["duration"])

    def to_dict(self) -> Dict[str, Any]:
        return {"duration": self.duration, "tileid": self.tileid}


@dataclass
class TileData:
    """Per-tile metadata of a tileset"""

    id: int
    properties: Optional[List[Dict[str, Any]]] = None
    animation: Optional[List[Frame]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TileData":
        animation = data.get("animation")
        return cls(
            id=data["id"],
            properties=data.get("properties"),
            animation=[Frame.from_dict(frame) for frame in animation] if animation is not None else None,
            extra=_extra(data, ("id", "properties", "animation")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["id"] = self.id
        if self.properties is not None:
            data["properties"] = self.properties
        if self.animation is not None:
            data["animation"] = [frame.to_dict() for frame in self.animation]
        return data


@dataclass(eq=False)
class Tileset:
    """
    Metadata of one atlas image.

    Tilesets compare and hash by identity so they can key the mapping from a
    source tileset to its decoded image.
    """

    firstgid: int
    tilecount: int
    tilewidth: int
    tileheight: int
    imagewidth: int
    imageheight: int = 0
    columns: int = 0
    image: str = ""
    name: str = ""
    margin: int = 0
    spacing: int = 0
    properties: Optional[List[Dict[str, Any]]] = None
    tiles: Optional[List[TileData]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def owns(self, gid: int) -> bool:
        """Check whether a global tile id falls in this tileset's range"""
        return self.firstgid <= gid < self.firstgid + self.tilecount

    def find_tile(self, gid: int) -> Optional[TileData]:
        """Get the per-tile metadata recorded for `gid`, if any"""
        for tile in self.tiles or []:
            if tile.id == gid:
                return tile
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tileset":
        tiles = data.get("tiles")
        return cls(
            firstgid=data["firstgid"],
            tilecount=data["tilecount"],
            tilewidth=data["tilewidth"],
            tileheight=data["tileheight"],
            imagewidth=data["imagewidth"],
            imageheight=data.get("imageheight", 0),
            columns=data.get("columns", 0),
            image=data.get("image", ""),
            name=data.get("name", ""),
            margin=data.get("margin", 0),
            spacing=data.get("spacing", 0),
            properties=data.get("properties"),
            tiles=[TileData.from_dict(tile) for tile in tiles] if tiles is not None else None,
            extra=_extra(data, _TILESET_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "columns": self.columns,
                "firstgid": self.firstgid,
                "image": self.image,
                "imageheight": self.imageheight,
                "imagewidth": self.imagewidth,
                "margin": self.margin,
                "name": self.name,
                "spacing": self.spacing,
                "tilecount": self.tilecount,
                "tileheight": self.tileheight,
                "tilewidth": self.tilewidth,
            }
        )
        if self.properties is not None:
            data["properties"] = self.properties
        if self.tiles is not None:
            data["tiles"] = [tile.to_dict() for tile in self.tiles]
        return data


def find_tileset(tilesets, gid: int) -> Optional["Tileset"]:
    """Find the tileset owning a global tile id"""
    for tileset in tilesets:
        if tileset.owns(gid):
            return tileset
    return None


@dataclass
class Layer:
    """A map layer; only tile layers carry `data`"""

    data: Optional[List[int]] = None
    name: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Layer":
        cells = data.get("data")
        return cls(
            data=list(cells) if cells is not None else None,
            name=data.get("name", ""),
            extra=_extra(data, ("data", "name")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["name"] = self.name
        if self.data is not None:
            data["data"] = self.data
        return data


@dataclass
class TileMap:
    """A map: ordered layers plus the tilesets their cells refer to"""

    layers: List[Layer] = field(default_factory=list)
    tilesets: List[Tileset] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        """Map width in tiles (0 when unknown)"""
        return self.extra.get("width", 0)

    @property
    def height(self) -> int:
        """Map height in tiles (0 when unknown)"""
        return self.extra.get("height", 0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TileMap":
        return cls(
            layers=[Layer.from_dict(layer) for layer in data.get("layers", [])],
            tilesets=[Tileset.from_dict(tileset) for tileset in data.get("tilesets", [])],
            extra=_extra(data, ("layers", "tilesets")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["layers"] = [layer.to_dict() for layer in self.layers]
        data["tilesets"] = [tileset.to_dict() for tileset in self.tilesets]
        return data


@dataclass
class OptimizedMap:
    """Result of an optimization: the rewritten map and its chunk images"""

    map: TileMap
    images: Dict[str, Image.Image]
