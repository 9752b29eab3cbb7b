'''
Receivers of the decoded content of a VOX file.

The reader doesn't build any intermediate representation: it calls the
methods of a VoxSink as soon as each piece is decoded, in this order

 1. on_version()
 2. on_palette() (only if the file has a palette)
 3. on_material() for each material (only when asked to decode them)
 4. on_model_count()
 5. for each model on_model_size() followed by on_voxel() for each of its voxels

VoxData is the sink that simply collects everything.
'''
from typing import List, Optional

from .types import DEFAULT_VERSION, Model
from .palette import Palette
from .material import MaterialPalette


class VoxSink(object):
    '''Interface for the consumers of the reader.'''

    def on_version(self, version: int):
        pass

    def on_palette(self, palette: Palette):
        pass

    def on_material(self, material_id: int, material):
        pass

    def on_model_count(self, count: int):
        pass

    def on_model_size(self, size):
        raise NotImplementedError(f"method {self.__class__.__name__}.on_model_size() not implemented")

    def on_voxel(self, voxel):
        raise NotImplementedError(f"method {self.__class__.__name__}.on_voxel() not implemented")


class VoxData(VoxSink):
    '''All the content of a VOX file, in memory.'''

    def __init__(self, models: Optional[List[Model]] = None, palette: Optional[Palette] = None,
                 materials: Optional[MaterialPalette] = None, version: int = DEFAULT_VERSION):
        self.version = version
        self.models = list(models) if models is not None else []
        self.palette = palette if palette is not None else Palette()
        self.materials = materials if materials is not None else MaterialPalette()

    def __repr__(self):
        return '<%s(version=%d,models=%r,palette=%r,materials=%d)>' % (
            self.__class__.__name__,
            self.version,
            self.models,
            self.palette,
            len(self.materials),
        )

    def on_version(self, version):
        self.version = version

    def on_palette(self, palette):
        self.palette = palette

    def on_material(self, material_id, material):
        self.materials.insert(material_id, material)

    def on_model_count(self, count):
        self.models = []

    def on_model_size(self, size):
        self.models.append(Model(size))

    def on_voxel(self, voxel):
        self.models[-1].voxels.append(voxel)
